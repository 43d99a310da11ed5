"""DTOs for login."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LoginResult:
    """Issued bearer token and the role codes cached for the session."""

    access_token: str
    token_type: str
    expires_in: int
    user_id: str
    roles: frozenset[str]
