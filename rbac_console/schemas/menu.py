"""Menu API schemas."""

from pydantic import BaseModel, ConfigDict, Field

from rbac_console.domain.enums import MenuType, Status


class MenuBody(BaseModel):
    menu_name: str = Field(..., min_length=1, max_length=64)
    route_name: str = Field(..., min_length=1, max_length=128)
    route_path: str = Field(..., min_length=1, max_length=255)
    component: str = Field(..., min_length=1, max_length=255)
    pid: int = Field(default=0, ge=0)
    order: int = 0
    menu_type: MenuType = MenuType.MENU
    status: Status = Status.ENABLED
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


class MenuCreate(MenuBody):
    """Request body for creating a menu. id is assigned by the store unless given."""

    id: int | None = Field(default=None, gt=0)


class MenuResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

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
