"""Endpoint ORM model. Catalog of assignable permissions, rebuilt from the route table at start-up."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rbac_console.infrastructure.persistence.database import Base
from rbac_console.infrastructure.persistence.models.mixins import TimestampMixin


class Endpoint(TimestampMixin, Base):
    """API endpoint descriptor. Table: sys_endpoint. id is derived from method + path."""

    __tablename__ = "sys_endpoint"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    path: Mapped[str] = mapped_column(String, nullable=False)
    method: Mapped[str] = mapped_column(String, nullable=False)
    action: Mapped[str] = mapped_column(String, nullable=False)
    resource: Mapped[str] = mapped_column(String, nullable=False, index=True)
    controller: Mapped[str] = mapped_column(String, nullable=False)
    summary: Mapped[str | None] = mapped_column(Text, nullable=True)
