# wipercheck/core/logger.py
from loguru import logger
import sys

# Default sink until setup_logging() applies the configured level
logger.remove()
logger.add(
    sys.stdout,
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
           "<level>{level}</level> | "
           "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
           "{message} {extra}",
    level="INFO",
)


def get_logger(component: str):
    """Return the shared logger bound to a pipeline component name."""
    return logger.bind(component=component)


__all__ = ["logger", "get_logger"]
