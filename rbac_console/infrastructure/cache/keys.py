"""Cache key builders. Single place for key format (DRY).

Key components must not contain CACHE_KEY_SEP to avoid colliding keys.
"""

from rbac_console.core.constants import CACHE_KEY_SEP, CACHE_PREFIX_AUTH_TOKEN


def _validate_key_component(value: str, name: str) -> None:
    """Raise ValueError if value is empty or contains the cache key separator."""
    if not value:
        raise ValueError(f"Cache key component {name!r} must not be empty")
    if CACHE_KEY_SEP in value:
        raise ValueError(
            f"Cache key component {name!r} must not contain separator {CACHE_KEY_SEP!r}"
        )


def session_authority_key(user_id: str) -> str:
    """Key of the cached role-code set of one user: auth:token:<user_id>."""
    _validate_key_component(user_id, "user_id")
    return f"{CACHE_PREFIX_AUTH_TOKEN}{CACHE_KEY_SEP}{user_id}"
