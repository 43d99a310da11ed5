"""Menu repository. Integer ids; pid 0 is the root."""

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_console.application.dtos.menu import MenuResult
from rbac_console.infrastructure.persistence.models.menu import Menu
from rbac_console.infrastructure.persistence.repositories.base import BaseRepository


def menu_to_result(m: Menu) -> MenuResult:
    """Map ORM Menu to application MenuResult."""
    return MenuResult(
        id=m.id,
        menu_name=m.menu_name,
        route_name=m.route_name,
        route_path=m.route_path,
        component=m.component,
        pid=m.pid,
        order=m.order,
        menu_type=m.menu_type,
        status=m.status,
        constant=m.constant,
    )


class MenuRepository(BaseRepository[Menu]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Menu)

    async def has_children(self, menu_id: int) -> bool:
        result = await self.db.execute(select(Menu.id).where(Menu.pid == menu_id).limit(1))
        return result.scalar_one_or_none() is not None

    async def create_menu(self, **fields: Any) -> MenuResult:
        """Create a menu from column values; return read-model DTO."""
        return menu_to_result(await self.create(Menu(**fields)))

    async def save(self, menu: Menu) -> MenuResult:
        return menu_to_result(await self.update(menu))
