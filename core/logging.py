"""
Structured logging configuration.

Uses structlog for context-rich logging. Development gets colored console
output, every other environment gets one JSON object per line.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from core.config import Settings


def configure_logging(app_settings: Optional["Settings"] = None) -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        app_settings: Settings to read environment/debug from
            (defaults to the process-wide settings)
    """
    if app_settings is None:
        from core.config import settings as app_settings

    level = logging.DEBUG if app_settings.debug else logging.INFO

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if app_settings.is_development:
        renderers: list[Processor] = [
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        renderers = [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=shared_processors + renderers,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # uvicorn and SQLAlchemy log through the stdlib
    logging.basicConfig(
        format="%(message)s",
        level=level,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def get_logger(name: str | None = None, **initial_context: Any) -> structlog.BoundLogger:
    """
    Get a logger, optionally bound to some initial context.

    Usage:
        logger = get_logger(__name__, product_id=7)
        logger.info("Product updated", price=1500)
    """
    logger = structlog.get_logger(name)
    if initial_context:
        logger = logger.bind(**initial_context)
    return logger
