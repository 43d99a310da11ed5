"""Menu (route) ORM model. Tree of console routes; integer ids, pid 0 is the root."""

from sqlalchemy import Boolean, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from rbac_console.domain.enums import MenuType
from rbac_console.infrastructure.persistence.database import Base
from rbac_console.infrastructure.persistence.models._status import (
    status_check,
    status_column,
)
from rbac_console.infrastructure.persistence.models.mixins import (
    ActorAuditMixin,
    TimestampMixin,
)


class Menu(TimestampMixin, ActorAuditMixin, Base):
    """Menu node. Table: sys_menu. constant menus are visible without any grant."""

    __tablename__ = "sys_menu"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    menu_name: Mapped[str] = mapped_column(String, nullable=False)
    menu_type: Mapped[str] = mapped_column(
        String, nullable=False, default=MenuType.MENU.value
    )
    icon_type: Mapped[int | None] = mapped_column(Integer, nullable=True)
    icon: Mapped[str | None] = mapped_column(String, nullable=True)
    route_name: Mapped[str] = mapped_column(String, nullable=False, index=True)
    route_path: Mapped[str] = mapped_column(String, nullable=False)
    component: Mapped[str] = mapped_column(String, nullable=False)
    path_param: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = status_column()
    active_menu: Mapped[str | None] = mapped_column(String, nullable=True)
    hide_in_menu: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    pid: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    i18n_key: Mapped[str | None] = mapped_column(String, nullable=True)
    keep_alive: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    constant: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    href: Mapped[str | None] = mapped_column(String, nullable=True)
    multi_tab: Mapped[bool | None] = mapped_column(Boolean, nullable=True)

    __table_args__ = (status_check("sys_menu"),)
