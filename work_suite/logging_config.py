"""Structured logging setup."""

import logging
import sys
from typing import Optional, TextIO

import structlog

from .config import Settings


def configure_logging(settings: Settings, stream: Optional[TextIO] = None) -> None:
    """Configure structlog for JSON or console output.

    ``stream`` defaults to stdout. The MCP server passes stderr because its
    stdio transport owns stdout.
    """
    level = logging.getLevelName(settings.log_level.upper())
    if not isinstance(level, int):
        level = logging.INFO

    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stdout),
        cache_logger_on_first_use=False,
    )
