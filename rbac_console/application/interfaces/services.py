"""Service interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any, Protocol


class IPolicyStore(Protocol):
    """Protocol for the enforcement engine's policy tuple store.

    Rules are positional: (role, resource, action, domain, effect). An empty
    string in a filter position matches any value.
    """

    def get_filtered_policy(self, field_index: int, *field_values: str) -> list[list[str]]:
        """Return rules whose fields starting at field_index match field_values."""
        ...

    def get_policy(self) -> list[list[str]]:
        """Return every rule in the store."""
        ...

    async def add_permission(
        self, role: str, resource: str, action: str, domain: str, effect: str = "allow"
    ) -> bool:
        """Add one rule; return False when it already existed."""
        ...

    async def remove_filtered_policy(self, field_index: int, *field_values: str) -> bool:
        """Remove every rule matching the filter; return True when any was removed."""
        ...

    def enforce(self, role: str, resource: str, action: str, domain: str) -> bool:
        """Return True when the role is allowed to act on resource within domain."""
        ...


class ISessionAuthorityCache(Protocol):
    """Protocol for the cached role-code set of each logged-in user."""

    async def refresh(self, user_id: str, role_codes: Iterable[str], ttl_seconds: int) -> None:
        """Replace (never merge) the cached role set of user_id."""
        ...

    async def resync(self, user_id: str, role_codes: Iterable[str]) -> bool:
        """Replace the role set of a live entry keeping its TTL; False when no entry."""
        ...

    async def invalidate(self, user_id: str) -> None:
        """Drop the cached role set of user_id."""
        ...

    async def read(self, user_id: str) -> set[str]:
        """Return the cached role set (empty when absent)."""
        ...


class IPasswordHasher(Protocol):
    """Protocol for password hashing (DIP)."""

    def hash(self, password: str) -> str:
        ...

    def verify(self, password: str, hashed: str) -> bool:
        ...


class ITokenService(Protocol):
    """Protocol for access token issue and verification (DIP)."""

    def create_access_token(self, data: dict[str, Any]) -> str:
        ...

    def verify_token(self, token: str) -> dict[str, Any]:
        ...
