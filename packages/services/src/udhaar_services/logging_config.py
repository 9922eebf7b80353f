"""structlog setup driven by ``UdhaarConfig.log_level``."""

import logging
from typing import Optional

import structlog

from .config import UdhaarConfig


def configure_logging(level: Optional[str] = None, *, json: bool = False) -> None:
    """Configure structlog once at startup.

    Args:
        level: Level name; defaults to the configured ``log_level``
        json: Render events as JSON instead of the console format
    """
    config = UdhaarConfig(log_level=level) if level else UdhaarConfig()
    level_name = config.log_level
    renderer = (
        structlog.processors.JSONRenderer()
        if json
        else structlog.dev.ConsoleRenderer(colors=False)
    )
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level_name)
        ),
        cache_logger_on_first_use=False,
    )
