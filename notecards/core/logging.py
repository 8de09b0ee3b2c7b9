"""
Structured logging setup.

Every module logs through structlog with an event name plus key/value
context, e.g.::

    logger = get_logger(__name__)
    logger.info("content_created", content_id=item.id, type=item.type)

``setup_logging`` is called once at process start; the renderer follows
``LOG_FORMAT`` (``json`` for log aggregation, ``text`` for a readable console).
"""

import logging
import sys
from typing import Any, Optional

import structlog

from notecards.core.config import settings


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Configure stdlib logging and structlog.

    Args:
        level: Log level name, defaults to settings.LOG_LEVEL
        fmt: "json" or "text", defaults to settings.LOG_FORMAT
    """
    level_name = (level or settings.LOG_LEVEL).upper()
    log_format = fmt or settings.LOG_FORMAT
    log_level = getattr(logging, level_name, logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
        force=True,
    )

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared_processors,
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger bound to ``name``."""
    return structlog.get_logger(name)
