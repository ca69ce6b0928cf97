# wipercheck/core/context.py
from dataclasses import dataclass, field
from typing import Any

from wipercheck.core.config import Settings, settings as default_settings
from wipercheck.core.logger import get_logger


@dataclass(frozen=True)
class ServiceContext:
    """
    Per-process context handed to every pipeline component.

    Built once at startup; components read configuration and log through
    it instead of importing module-level singletons.
    """

    settings: Settings = field(default_factory=lambda: default_settings)
    logger: Any = field(default_factory=lambda: get_logger("wipercheck"))

    def logger_for(self, component: str) -> Any:
        return self.logger.bind(component=component)
