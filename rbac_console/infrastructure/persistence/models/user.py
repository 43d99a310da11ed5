"""User ORM model. Each user has a home domain and zero or more role memberships."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from rbac_console.infrastructure.persistence.database import Base
from rbac_console.infrastructure.persistence.models._status import (
    status_check,
    status_column,
)
from rbac_console.infrastructure.persistence.models.mixins import IdentityModel


class User(IdentityModel, Base):
    """User. Table: sys_user. username unique; domain is the home domain code."""

    __tablename__ = "sys_user"

    username: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    password: Mapped[str] = mapped_column(String, nullable=False)
    domain: Mapped[str] = mapped_column(String, nullable=False, index=True)
    nick_name: Mapped[str] = mapped_column(String, nullable=False)
    avatar: Mapped[str | None] = mapped_column(String, nullable=True)
    email: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    phone_number: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    status: Mapped[str] = status_column()

    __table_args__ = (status_check("sys_user"),)
