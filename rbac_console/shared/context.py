"""Request context management using contextvars.

Async-safe storage for request-scoped data: the request id set by
RequestIDMiddleware and the authenticated user id set by the auth
dependency. Both are read by the logging filter.
"""

from contextvars import ContextVar

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)
_current_user_id: ContextVar[str | None] = ContextVar("current_user_id", default=None)


def set_request_id(request_id: str | None) -> None:
    _request_id.set(request_id)


def get_request_id() -> str | None:
    return _request_id.get()


def set_current_user_id(user_id: str | None) -> None:
    _current_user_id.set(user_id)


def get_current_user_id() -> str | None:
    """Return the id of the authenticated caller, or None outside a request."""
    return _current_user_id.get()
