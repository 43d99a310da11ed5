"""DTOs for domain use cases (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class DomainResult:
    """Domain read-model."""

    id: str
    code: str
    name: str
    description: str | None
    status: str
