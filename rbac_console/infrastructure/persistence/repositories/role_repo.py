"""Role repository. Read methods return RoleResult; entity getters return ORM for writes."""

from collections.abc import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_console.application.dtos.role import RoleResult
from rbac_console.infrastructure.persistence.models.role import Role
from rbac_console.infrastructure.persistence.repositories.base import BaseRepository


def role_to_result(r: Role) -> RoleResult:
    """Map ORM Role to application RoleResult."""
    return RoleResult(
        id=r.id,
        code=r.code,
        name=r.name,
        pid=r.pid,
        status=r.status,
        description=r.description,
    )


class RoleRepository(BaseRepository[Role]):
    """Role repository. get_for_update locks the role row for the rest of the transaction."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Role)

    async def get_for_update(self, role_id: str) -> Role | None:
        """Return the role with a row lock (SELECT ... FOR UPDATE), or None."""
        result = await self.db.execute(
            select(Role).where(Role.id == role_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def get_by_code(self, code: str) -> Role | None:
        result = await self.db.execute(select(Role).where(Role.code == code))
        return result.scalar_one_or_none()

    async def code_exists(self, code: str, *, exclude_id: str | None = None) -> bool:
        stmt = select(Role.id).where(Role.code == code)
        if exclude_id is not None:
            stmt = stmt.where(Role.id != exclude_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def codes_for_ids(self, role_ids: Iterable[str]) -> set[str]:
        wanted = set(role_ids)
        if not wanted:
            return set()
        result = await self.db.execute(select(Role.code).where(Role.id.in_(wanted)))
        return set(result.scalars().all())

    async def all_codes(self) -> set[str]:
        result = await self.db.execute(select(Role.code))
        return set(result.scalars().all())

    async def id_code_pairs(self) -> list[tuple[str, str]]:
        result = await self.db.execute(select(Role.id, Role.code))
        return [(row.id, row.code) for row in result.all()]

    async def create_role(
        self,
        code: str,
        name: str,
        pid: str,
        description: str | None,
        status: str,
        *,
        role_id: str | None = None,
        created_by: str | None = None,
    ) -> RoleResult:
        """Create a role (with a caller-chosen id when given); return read-model DTO."""
        role = Role(
            code=code,
            name=name,
            pid=pid,
            description=description,
            status=status,
            created_by=created_by,
        )
        if role_id is not None:
            role.id = role_id
        return role_to_result(await self.create(role))

    async def save(self, role: Role) -> RoleResult:
        return role_to_result(await self.update(role))
