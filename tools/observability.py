"""Observability helpers for instrumenting service operations."""

from __future__ import annotations

import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable, TypeVar

from closet_app.logging_config import (
    correlation_context,
    ensure_correlation_id,
    get_logger,
    log_event,
    redact_for_log,
)

LOGGER = get_logger(__name__)
F = TypeVar("F", bound=Callable[..., Any])


def _preview_kwargs(kwargs: dict, max_keys: int = 6) -> dict:
    preview: dict = {}
    for idx, (key, value) in enumerate(kwargs.items()):
        if idx >= max_keys:
            preview["truncated"] = True
            break
        preview[key] = value if isinstance(value, (str, int, float, bool, type(None))) else type(value).__name__
    return redact_for_log(preview)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def instrument_operation(operation: str) -> Callable[[F], F]:
    """Wrap a sync or async callable to emit started/completed/failed events.

    Exceptions are logged and re-raised unchanged.
    """

    def started(correlation_id: str, kwargs: dict) -> float:
        log_event(
            LOGGER,
            logging.INFO,
            "operation_started",
            operation=operation,
            correlation_id=correlation_id,
            kwargs=_preview_kwargs(kwargs),
        )
        return time.perf_counter()

    def failed(correlation_id: str, start: float) -> None:
        log_event(
            LOGGER,
            logging.ERROR,
            "operation_failed",
            operation=operation,
            correlation_id=correlation_id,
            duration_ms=_elapsed_ms(start),
            exc_info=True,
        )

    def completed(correlation_id: str, start: float) -> None:
        log_event(
            LOGGER,
            logging.INFO,
            "operation_completed",
            operation=operation,
            correlation_id=correlation_id,
            duration_ms=_elapsed_ms(start),
        )

    def decorator(func: F) -> F:
        if inspect.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with correlation_context(ensure_correlation_id()) as correlation_id:
                    start = started(correlation_id, kwargs)
                    try:
                        result = await func(*args, **kwargs)
                    except Exception:
                        failed(correlation_id, start)
                        raise
                    completed(correlation_id, start)
                    return result

            return async_wrapper  # type: ignore[return-value]

        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with correlation_context(ensure_correlation_id()) as correlation_id:
                start = started(correlation_id, kwargs)
                try:
                    result = func(*args, **kwargs)
                except Exception:
                    failed(correlation_id, start)
                    raise
                completed(correlation_id, start)
                return result

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = ["instrument_operation"]
