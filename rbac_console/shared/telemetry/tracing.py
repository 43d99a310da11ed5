"""The traced decorator: one span per reconciler, cascade, catalog and sweep call."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

# Scope arguments recorded on spans. Never passwords, tokens or desired sets.
_SCOPE_ARGS = frozenset({"domain", "role_id", "user_id", "menu_id", "domain_id"})


def _record_scope(span: trace.Span, signature: inspect.Signature, args: tuple, kwargs: dict) -> None:
    try:
        bound = signature.bind_partial(*args, **kwargs)
    except TypeError:
        return
    for name, value in bound.arguments.items():
        if name in _SCOPE_ARGS:
            span.set_attribute(f"rbac.{name}", str(value))


def traced(operation_name: str | None = None) -> Callable:
    """Wrap an async function in a span named operation_name (default module.func).

    Scope arguments (domain, role_id, ...) become span attributes whether passed
    by position or keyword. Exceptions mark the span as error and propagate.
    """

    def decorator(func: Callable) -> Callable:
        if not inspect.iscoroutinefunction(func):
            raise TypeError(f"traced expects an async function, got {func!r}")
        tracer = trace.get_tracer(func.__module__)
        span_name = operation_name or f"{func.__module__}.{func.__name__}"
        signature = inspect.signature(func)

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            with tracer.start_as_current_span(span_name) as span:
                _record_scope(span, signature, args, kwargs)
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    span.set_status(Status(StatusCode.ERROR, str(e)))
                    span.record_exception(e)
                    raise
                span.set_status(Status(StatusCode.OK))
                return result

        return wrapper

    return decorator


def add_span_attributes(**attributes: str | int | float | bool) -> None:
    """Set attributes (e.g. added/removed counts) on the current span."""
    span = trace.get_current_span()
    if span.is_recording():
        for key, value in attributes.items():
            span.set_attribute(f"rbac.{key}", value)
