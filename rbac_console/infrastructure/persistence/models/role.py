"""Role ORM model. Global roles whose grants (menus, permissions) are domain-scoped."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rbac_console.infrastructure.persistence.database import Base
from rbac_console.infrastructure.persistence.models._status import (
    status_check,
    status_column,
)
from rbac_console.infrastructure.persistence.models.mixins import IdentityModel


class Role(IdentityModel, Base):
    """Role. Table: sys_role. code unique; pid is the parent role id or "0" for root."""

    __tablename__ = "sys_role"

    code: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    pid: Mapped[str] = mapped_column(String, nullable=False, default="0", index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = status_column()

    __table_args__ = (status_check("sys_role"),)
