"""Join tables owned by the reconciler: RoleMenu, UserRole, RolePermission.

No foreign keys or ON DELETE actions: dependent rows are removed by the
cascade service, and the reconciliation sweep removes orphans left by a
crash between steps.
"""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rbac_console.infrastructure.persistence.database import Base


class RoleMenu(Base):
    """Role-menu grant within a domain. Table: sys_role_menu. Unique (role_id, menu_id, domain)."""

    __tablename__ = "sys_role_menu"

    role_id: Mapped[str] = mapped_column(String, primary_key=True)
    menu_id: Mapped[int] = mapped_column(Integer, primary_key=True)
    domain: Mapped[str] = mapped_column(String, primary_key=True)

    __table_args__ = (
        Index("ix_role_menu_role_domain", "role_id", "domain"),
        Index("ix_role_menu_domain", "domain"),
    )


class UserRole(Base):
    """User-role membership. Table: sys_user_role. Unique (user_id, role_id)."""

    __tablename__ = "sys_user_role"

    user_id: Mapped[str] = mapped_column(String, primary_key=True)
    role_id: Mapped[str] = mapped_column(String, primary_key=True)

    __table_args__ = (Index("ix_user_role_role", "role_id"),)


class RolePermission(Base):
    """Role-endpoint grant within a domain. Table: sys_role_permission.

    Relational record of permission assignments; policy tuples are derived
    from it (resource and action of the endpoint).
    """

    __tablename__ = "sys_role_permission"

    role_id: Mapped[str] = mapped_column(String, primary_key=True)
    endpoint_id: Mapped[str] = mapped_column(String, primary_key=True)
    domain: Mapped[str] = mapped_column(String, primary_key=True)

    __table_args__ = (
        Index("ix_role_permission_role_domain", "role_id", "domain"),
        Index("ix_role_permission_domain", "domain"),
    )
