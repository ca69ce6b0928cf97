# wipercheck/core/logging_config.py
from loguru import logger
import sys

from wipercheck.core.config import Settings


def setup_logging(settings: Settings) -> None:
    """
    Configure application-wide logging using loguru.

    Structured fields passed through ``logger.bind`` or as keyword
    arguments (address, action, step index...) end up in ``{extra}``.
    """
    # Remove default handler added by loguru / wipercheck.core.logger
    logger.remove()

    logger.add(
        sys.stdout,
        level=settings.LOG_LEVEL.upper(),
        format=(
            "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
            "<level>{message}</level> {extra}"
        ),
        enqueue=True,
        backtrace=True,
        diagnose=settings.ENVIRONMENT == "development",
    )
    logger.info(
        "Logging configured for {} ({}) at level {}",
        settings.APP_NAME,
        settings.ENVIRONMENT,
        settings.LOG_LEVEL.upper(),
    )
