"""RoleMenu repository: role-menu grants per domain (single entity responsibility)."""

from collections.abc import Iterable

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_console.infrastructure.persistence.models.domain import Domain
from rbac_console.infrastructure.persistence.models.menu import Menu
from rbac_console.infrastructure.persistence.models.relations import RoleMenu
from rbac_console.infrastructure.persistence.models.role import Role


class RoleMenuRepository:
    """Role-menu link table only. Typed id sets and bulk add/remove per (role, domain)."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def menu_ids_for(self, role_id: str, domain: str) -> set[int]:
        result = await self.db.execute(
            select(RoleMenu.menu_id).where(
                RoleMenu.role_id == role_id, RoleMenu.domain == domain
            )
        )
        return set(result.scalars().all())

    async def add_many(self, role_id: str, domain: str, menu_ids: Iterable[int]) -> int:
        rows = [RoleMenu(role_id=role_id, menu_id=m, domain=domain) for m in set(menu_ids)]
        if not rows:
            return 0
        self.db.add_all(rows)
        await self.db.flush()
        return len(rows)

    async def remove_many(self, role_id: str, domain: str, menu_ids: Iterable[int]) -> int:
        wanted = set(menu_ids)
        if not wanted:
            return 0
        result = await self.db.execute(
            delete(RoleMenu).where(
                RoleMenu.role_id == role_id,
                RoleMenu.domain == domain,
                RoleMenu.menu_id.in_(wanted),
            )
        )
        return result.rowcount or 0

    async def exists_for_domain(self, domain: str) -> bool:
        result = await self.db.execute(
            select(RoleMenu.role_id).where(RoleMenu.domain == domain).limit(1)
        )
        return result.first() is not None

    async def delete_by_role(self, role_id: str) -> int:
        result = await self.db.execute(delete(RoleMenu).where(RoleMenu.role_id == role_id))
        return result.rowcount or 0

    async def delete_by_domain(self, domain: str) -> int:
        result = await self.db.execute(delete(RoleMenu).where(RoleMenu.domain == domain))
        return result.rowcount or 0

    async def delete_by_menu(self, menu_id: int) -> int:
        result = await self.db.execute(delete(RoleMenu).where(RoleMenu.menu_id == menu_id))
        return result.rowcount or 0

    async def delete_orphans(self) -> int:
        """Delete rows whose role, menu or domain no longer exists."""
        result = await self.db.execute(
            delete(RoleMenu)
            .where(
                or_(
                    RoleMenu.role_id.not_in(select(Role.id)),
                    RoleMenu.menu_id.not_in(select(Menu.id)),
                    RoleMenu.domain.not_in(select(Domain.code)),
                )
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
