"""Structured logging configuration with structlog."""

from __future__ import annotations

import logging
import sys
from functools import partial
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import Processor

if TYPE_CHECKING:
    from duckdb_s3_source.core.config import Settings

SENSITIVE_KEYS = frozenset({"secret_access_key", "secret", "password", "token"})
MASK = "**********"
DEFAULT_SERVICE_NAME = "duckdb-s3-source"


def mask_sensitive_fields(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Replace values of credential-like keys before rendering."""
    for key in event_dict:
        if key.lower() in SENSITIVE_KEYS:
            event_dict[key] = MASK
    return event_dict


def add_service_context(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
    service: str = DEFAULT_SERVICE_NAME,
) -> dict[str, Any]:
    """Add service metadata to all log entries."""
    event_dict.setdefault("service", service)
    return event_dict


def configure_logging(settings: Settings | None = None) -> None:
    """Configure structlog for console or JSON output.

    Args:
        settings: Connector settings. If None, uses defaults.
    """
    if settings is None:
        from duckdb_s3_source.core.config import get_settings

        settings = get_settings()

    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    is_development = settings.ENVIRONMENT == "development"
    is_tty = sys.stderr.isatty()

    common_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        mask_sensitive_fields,
        partial(add_service_context, service=settings.APP_NAME),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if is_development and is_tty:
        processors = [
            *common_processors,
            structlog.processors.ExceptionPrettyPrinter(),
            structlog.dev.ConsoleRenderer(colors=True),
        ]
        log_factory = structlog.PrintLoggerFactory(file=sys.stderr)
    else:
        processors = [
            *common_processors,
            structlog.processors.format_exc_info,
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
        # Host plugins read stdout, keep log output on stderr.
        log_factory = structlog.WriteLoggerFactory(file=sys.stderr)

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=log_factory,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=log_level,
        force=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger.

    Args:
        name: Logger name. If None, uses caller's module name.

    Returns:
        Configured bound logger with context support.
    """
    return structlog.get_logger(name)
