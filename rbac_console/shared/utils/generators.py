"""Identifier generators for domain, role and user rows."""

from cuid2 import cuid_wrapper

_next_cuid = cuid_wrapper()


def generate_id() -> str:
    """Return a new collision-resistant id (CUID2)."""
    value = _next_cuid()
    if not isinstance(value, str):
        raise TypeError(f"cuid2 returned {type(value).__name__}, expected str")
    return value
