"""Session authority cache (Redis) and key builders."""

from rbac_console.infrastructure.cache.keys import session_authority_key
from rbac_console.infrastructure.cache.session_authority_cache import (
    SessionAuthorityCache,
)

__all__ = ["SessionAuthorityCache", "session_authority_key"]
