"""DTOs for user use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class UserResult:
    """User read-model (never carries the password hash)."""

    id: str
    username: str
    domain: str
    nick_name: str
    avatar: str | None
    email: str | None
    phone_number: str | None
    status: str


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity resolved from a verified bearer token."""

    user_id: str
    username: str
    domain: str
