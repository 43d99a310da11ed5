"""DTOs for menu use cases (no dependency on ORM)."""

from dataclasses import dataclass

from rbac_console.domain.enums import MenuType, Status


@dataclass(frozen=True)
class MenuInput:
    """Writable menu fields for create/update."""

    menu_name: str
    route_name: str
    route_path: str
    component: str
    pid: int = 0
    order: int = 0
    menu_type: str = MenuType.MENU.value
    status: str = Status.ENABLED.value
    constant: bool = False
    icon_type: int | None = None
    icon: str | None = None
    path_param: str | None = None
    active_menu: str | None = None
    hide_in_menu: bool | None = None
    i18n_key: str | None = None
    keep_alive: bool | None = None
    href: str | None = None
    multi_tab: bool | None = None


@dataclass(frozen=True)
class MenuResult:
    """Menu read-model."""

    id: int
    menu_name: str
    route_name: str
    route_path: str
    component: str
    pid: int
    order: int
    menu_type: str
    status: str
    constant: bool
