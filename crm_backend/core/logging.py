"""
core/logging.py
---------------
Structured logging using structlog.
DEBUG=true  → human-readable console output
DEBUG=false → JSON (for log aggregators like Datadog, CloudWatch)

Every line logged while a request is served carries the request id and,
once the caller is authenticated, the caller id, role and company id.
Credentials never reach the output: known secret keys are masked.
"""

import logging
import sys
from typing import Any, MutableMapping

import structlog

from crm_backend.core.config import settings

_SECRET_KEYS = frozenset(
    {"password", "hashed_password", "password_hash", "access_token", "token", "authorization"}
)


def _mask_secrets(_logger: Any, _method: str, event_dict: MutableMapping) -> MutableMapping:
    for key in _SECRET_KEYS.intersection(event_dict):
        event_dict[key] = "***"
    return event_dict


def configure_logging() -> None:
    log_level = logging.getLevelName(settings.log_level)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    if not settings.DEBUG:
        logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.SQL_ECHO else logging.WARNING
    )
    # passlib complains about the bcrypt build metadata on import
    logging.getLogger("passlib").setLevel(logging.ERROR)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _mask_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    renderer = (
        structlog.dev.ConsoleRenderer()
        if settings.DEBUG
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def start_request_context(**values) -> None:
    """Reset the per-request log context (request id, method, path)."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(**values)


def bind_request_context(**values) -> None:
    """Add the authenticated caller to the current request's log context."""
    structlog.contextvars.bind_contextvars(**values)


def get_logger(name: str = __name__):
    return structlog.get_logger(name)
