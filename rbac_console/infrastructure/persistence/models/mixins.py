"""SQLAlchemy mixins for common model patterns (DRY).

Provides: IdMixin, TimestampMixin, ActorAuditMixin and the combined
IdentityModel used by domain, role and user tables.
"""

from datetime import datetime

from sqlalchemy import DateTime, String
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func

from rbac_console.shared.utils.generators import generate_id


class IdMixin:
    """Mixin for models using a generated CUID2 string as primary key."""

    @declared_attr
    def id(cls) -> Mapped[str]:
        return mapped_column(String, primary_key=True, default=generate_id)


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime | None]:
        return mapped_column(
            DateTime(timezone=True), nullable=True, onupdate=func.now()
        )


class ActorAuditMixin:
    """Mixin for created_by / updated_by (id of the acting user, no FK)."""

    @declared_attr
    def created_by(cls) -> Mapped[str | None]:
        return mapped_column(String, nullable=True)

    @declared_attr
    def updated_by(cls) -> Mapped[str | None]:
        return mapped_column(String, nullable=True)


class IdentityModel(IdMixin, TimestampMixin, ActorAuditMixin):
    """Combined mixin: generated id + timestamps + actor audit. Common for identity tables."""

    __abstract__ = True
