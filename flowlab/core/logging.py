"""
Structured logging configuration for FlowLab.

Uses structlog for JSON-formatted logs in production,
and colored console output in development.
"""

import logging
import sys
from typing import Any

import structlog

from flowlab.core.settings import settings


def configure_logging() -> None:
    """Configure structured logging based on environment."""

    # Shared processors for all environments
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if settings.app_debug:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]
    else:
        # JSON output for log aggregators
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    log_level = logging.DEBUG if settings.app_debug else logging.INFO

    # Logs go to stderr so that reports printed on stdout stay machine-readable
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
    )


def get_logger(name: str = __name__) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger

    Example:
        >>> from flowlab.core.logging import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("device_updated", device="m1", device_type="Mixer")
    """
    return structlog.get_logger(name)
