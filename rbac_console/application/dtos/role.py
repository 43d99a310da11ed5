"""DTOs for role use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class RoleResult:
    """Role read-model."""

    id: str
    code: str
    name: str
    pid: str
    status: str
    description: str | None
