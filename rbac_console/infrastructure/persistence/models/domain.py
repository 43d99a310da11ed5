"""Domain ORM model. Tenant partition that scopes policy tuples and role-menu grants."""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from rbac_console.infrastructure.persistence.database import Base
from rbac_console.infrastructure.persistence.models._status import (
    status_check,
    status_column,
)
from rbac_console.infrastructure.persistence.models.mixins import IdentityModel


class Domain(IdentityModel, Base):
    """Tenant domain. Table: sys_domain. code is unique and referenced by policy tuples."""

    __tablename__ = "sys_domain"

    code: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = status_column()

    __table_args__ = (status_check("sys_domain"),)
