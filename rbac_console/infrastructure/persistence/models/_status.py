"""Shared status column helpers for identity tables."""

from sqlalchemy import CheckConstraint, String
from sqlalchemy.orm import Mapped, mapped_column

from rbac_console.domain.enums import Status


def status_column() -> Mapped[str]:
    """Status column (ENABLED / DISABLED), default ENABLED."""
    return mapped_column(String, nullable=False, default=Status.ENABLED.value, index=True)


def status_check(table: str) -> CheckConstraint:
    """Check constraint restricting status to Status values."""
    allowed = ", ".join(f"'{v}'" for v in Status.values())
    return CheckConstraint(f"status IN ({allowed})", name=f"{table}_status_check")
