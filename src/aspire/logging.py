"""
Structured logging for the Aspire API.

Every record is a structlog event. Request-scoped fields (``request_id`` and,
once a token has been verified, ``user_id``) live in structlog's contextvars
and are merged into each event, so resolvers never pass them around.
"""

import logging
import sys
import uuid
from collections.abc import Mapping
from typing import Any

import structlog

REDACTED = "[REDACTED]"

# Substrings that mark a key as carrying a credential
SENSITIVE_KEYS = (
    "password",
    "token",
    "secret",
    "authorization",
    "cookie",
    "credentials",
)

NOISY_LOGGERS = ("uvicorn.access", "aiosqlite", "asyncio")


def is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_KEYS)


def redact(values: Mapping[str, Any]) -> dict[str, Any]:
    """Return a copy of ``values`` with credential-like keys masked."""
    return {key: REDACTED if is_sensitive(key) else value for key, value in values.items()}


def redact_credentials(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog processor masking credential-like keys on the event itself."""
    _ = logger, method_name
    return redact(event_dict)


def _resolve_level(debug: bool, level: str | None) -> int:
    if debug:
        return logging.DEBUG
    if level:
        return logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    return logging.INFO


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    """Configure structlog on top of stdlib logging.

    Args:
        debug: Render human-readable console output at DEBUG level. When
            False, events are rendered as JSON lines.
        level: Log level name used when ``debug`` is False (default INFO).
    """
    log_level = _resolve_level(debug, level)

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(log_level, logging.WARNING))

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        redact_credentials,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    processors.append(
        structlog.dev.ConsoleRenderer(colors=True) if debug else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def set_request_context(request_id: str | None = None) -> str:
    """Start a fresh logging context for one request and return its id."""
    request_id = request_id or uuid.uuid4().hex[:16]
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id=request_id)
    return request_id


def bind_user_id(user_id: str | None) -> None:
    """Attach the authenticated user id to every later event of this request."""
    if user_id is None:
        structlog.contextvars.unbind_contextvars("user_id")
    else:
        structlog.contextvars.bind_contextvars(user_id=user_id)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_request_context() -> dict[str, Any]:
    """Fields currently merged into every event (``request_id``, ``user_id``)."""
    return structlog.contextvars.get_contextvars()
