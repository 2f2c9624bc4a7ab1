"""Structured JSON logging for the outfit engine.

Every record carries an ``event`` name and the correlation id of the request
or engine run that produced it. Wardrobe owners' identifiers, free-text item
notes and credentials are scrubbed before they reach a handler.
"""

from __future__ import annotations

import contextlib
import contextvars
import json
import logging
import os
import re
import time
import uuid
from typing import Any, Dict, Iterator, Optional

CORRELATION_ID: contextvars.ContextVar[Optional[str]] = contextvars.ContextVar("correlation_id", default=None)

# Attributes every LogRecord already has; "message" and "asctime" are added by formatters.
_RECORD_ATTRIBUTES = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}

REDACTED_KEYS = frozenset(
    {
        "user_id",
        "email",
        "name",
        "notes",
        "brand",
        "image_url",
        "api_key",
        "google_api_key",
        "token",
        "huggingface_token",
    }
)
_EMAIL = re.compile(r"[\w.\-]+@[\w.\-]+")
_URL_PREFIXES = ("http://", "https://")


class StructuredFormatter(logging.Formatter):
    """Render a record and its ``extra`` fields as one JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S%z"),
            "level": record.levelname,
            "logger": record.name,
            "event": getattr(record, "event", message),
            "message": message,
            "correlation_id": getattr(record, "correlation_id", None) or CORRELATION_ID.get(),
        }
        payload.update(
            (key, redact_for_log(value))
            for key, value in record.__dict__.items()
            if key not in _RECORD_ATTRIBUTES and key not in payload
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(level: int | str | None = None) -> None:
    """Install a single JSON handler on the root logger.

    ``LOG_LEVEL`` is read when no level is given. Calling this again replaces
    the handler instead of stacking another one.
    """

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())
    logging.basicConfig(level=level or os.getenv("LOG_LEVEL", "INFO"), handlers=[handler], force=True)


def get_logger(name: str) -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


def _scrub_text(value: str) -> str:
    if _EMAIL.search(value):
        return _EMAIL.sub("[redacted-email]", value)
    if value.lower().startswith(_URL_PREFIXES):
        return "[redacted-url]"
    return value


def redact_for_log(payload: Any) -> Any:
    """Return a copy of ``payload`` that is safe to log.

    Mapping keys listed in ``REDACTED_KEYS`` are masked whatever their value,
    strings containing e-mail addresses or URLs are masked, and unknown
    objects are logged by their ``str`` form.
    """

    if payload is None or isinstance(payload, (bool, int, float)):
        return payload
    if isinstance(payload, str):
        return _scrub_text(payload)
    if isinstance(payload, dict):
        return {
            key: "[redacted]" if key in REDACTED_KEYS else redact_for_log(value)
            for key, value in payload.items()
        }
    if isinstance(payload, (list, tuple, set)):
        return [redact_for_log(item) for item in payload]
    return str(payload)


def ensure_correlation_id(correlation_id: str | None = None) -> str:
    """Adopt ``correlation_id``, or keep the current one, or start a new one."""

    if correlation_id:
        CORRELATION_ID.set(correlation_id)
        return correlation_id
    current = CORRELATION_ID.get()
    if current:
        return current
    fresh = uuid.uuid4().hex
    CORRELATION_ID.set(fresh)
    return fresh


@contextlib.contextmanager
def correlation_context(correlation_id: str | None = None) -> Iterator[str]:
    token = CORRELATION_ID.set(correlation_id or CORRELATION_ID.get() or uuid.uuid4().hex)
    try:
        yield CORRELATION_ID.get()
    finally:
        CORRELATION_ID.reset(token)


def log_event(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with ``fields`` attached to the record as attributes.

    Fields named like built-in record attributes are prefixed with
    ``field_`` so they cannot clash with them.
    """

    correlation_id = ensure_correlation_id(fields.pop("correlation_id", None))
    exc_info = fields.pop("exc_info", None)
    extra: Dict[str, Any] = {"event": event, "correlation_id": correlation_id}
    for key, value in redact_for_log(fields).items():
        extra[f"field_{key}" if key in _RECORD_ATTRIBUTES else key] = value
    logger.log(level, event, exc_info=exc_info, extra=extra)


@contextlib.contextmanager
def operation_context(name: str, **attributes: Any) -> Iterator[str]:
    """Run a block under one correlation id and log its duration at DEBUG."""

    logger = get_logger("closet_app.operations")
    start = time.perf_counter()
    with correlation_context(attributes.get("correlation_id") or CORRELATION_ID.get()) as scoped_id:
        try:
            yield scoped_id
        finally:
            logger.debug("%s took %.2fms", name, (time.perf_counter() - start) * 1000)


__all__ = [
    "CORRELATION_ID",
    "REDACTED_KEYS",
    "StructuredFormatter",
    "configure_logging",
    "correlation_context",
    "ensure_correlation_id",
    "get_logger",
    "log_event",
    "operation_context",
    "redact_for_log",
]
