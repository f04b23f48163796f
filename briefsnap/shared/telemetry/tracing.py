"""Span helpers for service and client calls."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

_tracer = trace.get_tracer("briefsnap")

# Keyword arguments recorded on spans. Comment text, tokens and payloads never are.
_RECORDED_KWARGS = frozenset({
    "slug", "topic", "location", "article_id", "user_id",
    "summary_type", "page_size", "limit", "query",
})


def _annotate(span: trace.Span, kwargs: dict[str, Any]) -> None:
    for key, value in kwargs.items():
        if key in _RECORDED_KWARGS and value is not None:
            span.set_attribute(f"briefsnap.{key}", str(value))


def _fail(span: trace.Span, error: Exception) -> None:
    span.set_status(Status(StatusCode.ERROR, str(error)))
    span.record_exception(error)


def traced(name: str) -> Callable:
    """Run the decorated callable inside a span called ``name``.

    Works for sync and async callables. An exception marks the span as
    failed and propagates unchanged.
    """

    def decorator(func: Callable) -> Callable:
        if asyncio.iscoroutinefunction(func):

            @wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                with _tracer.start_as_current_span(name) as span:
                    _annotate(span, kwargs)
                    try:
                        return await func(*args, **kwargs)
                    except Exception as e:
                        _fail(span, e)
                        raise

            return async_wrapper

        @wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with _tracer.start_as_current_span(name) as span:
                _annotate(span, kwargs)
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    _fail(span, e)
                    raise

        return sync_wrapper

    return decorator


def record_cache_outcome(namespace: str, key: str, hit: bool) -> None:
    """Tag the current span with the cache namespace, key and hit or miss."""
    span = trace.get_current_span()
    if span.is_recording():
        span.set_attribute("cache.namespace", namespace)
        span.set_attribute("cache.key", key)
        span.set_attribute("cache.hit", hit)
