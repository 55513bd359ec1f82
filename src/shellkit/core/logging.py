"""Structured logging configuration with request context support."""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog
from structlog.typing import Processor


def configure_logging() -> None:
    """Configure structlog and stdlib logging from LOG_FORMAT and LOG_LEVEL."""
    log_format = os.getenv("LOG_FORMAT", "console").lower()
    log_level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    log_level = getattr(logging, log_level_name, logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer: Processor
    if log_format == "json":
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )

    # Route stdlib loggers (uvicorn, sqlalchemy) to the same stream and level
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level, force=True)


def get_logger(name: str | None = None) -> Any:
    """Get a structlog logger, optionally bound to a module name."""
    if name is None:
        return structlog.get_logger()
    return structlog.get_logger(name)


def add_request_context(**kwargs: Any) -> None:
    """Bind key-value pairs to the logging context of the current request."""
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_request_context(*keys: str) -> None:
    """Remove specific keys from the logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def reset_request_context() -> None:
    """Clear the whole logging context."""
    structlog.contextvars.clear_contextvars()
