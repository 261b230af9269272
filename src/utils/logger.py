"""
Structured Logging
==================

structlog setup for the product entry service.

Request handlers bind a request id into structlog's context variables,
so every event emitted while a document moves through the pipeline
(extraction, chunk calls, parsing) carries the id of the upload that
caused it.
"""

import logging
import sys
from typing import Any

import structlog

from src.config.settings import get_settings

# Processors applied before rendering, in both output modes
_BASE_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.UnicodeDecoder(),
]


def _renderers(json_output: bool) -> list[Any]:
    if json_output:
        return [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    return [structlog.dev.ConsoleRenderer(colors=True)]


def configure_logging() -> None:
    """
    Route stdlib logging to stdout and configure structlog.

    Production emits one JSON object per event; every other
    environment gets the colored console renderer.
    """
    settings = get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
    )

    structlog.configure(
        processors=[*_BASE_PROCESSORS, *_renderers(settings.is_production)],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)


def bind_request_context(**values: Any) -> None:
    """Start a fresh logging context for one HTTP request."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


def preview(text: str, limit: int = 2000) -> str:
    """Truncate long text for debug log fields."""
    return text[:limit] + "..." if len(text) > limit else text
