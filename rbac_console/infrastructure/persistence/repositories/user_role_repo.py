"""UserRole repository: user-role memberships (single entity responsibility)."""

from collections.abc import Iterable

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_console.infrastructure.persistence.models.relations import UserRole
from rbac_console.infrastructure.persistence.models.role import Role
from rbac_console.infrastructure.persistence.models.user import User


class UserRoleRepository:
    """User-role link table only. Memberships are domain-agnostic."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def user_ids_for_role(self, role_id: str) -> set[str]:
        result = await self.db.execute(
            select(UserRole.user_id).where(UserRole.role_id == role_id)
        )
        return set(result.scalars().all())

    async def role_codes_for_user(self, user_id: str) -> set[str]:
        """Return the codes of every role the user is a member of."""
        result = await self.db.execute(
            select(Role.code)
            .join(UserRole, UserRole.role_id == Role.id)
            .where(UserRole.user_id == user_id)
        )
        return set(result.scalars().all())

    async def role_codes_by_user(self, user_ids: Iterable[str]) -> dict[str, set[str]]:
        """Return role codes per user for every given user (empty set when none)."""
        wanted = set(user_ids)
        codes: dict[str, set[str]] = {u: set() for u in wanted}
        if not wanted:
            return codes
        result = await self.db.execute(
            select(UserRole.user_id, Role.code)
            .join(Role, UserRole.role_id == Role.id)
            .where(UserRole.user_id.in_(wanted))
        )
        for row in result.all():
            codes[row.user_id].add(row.code)
        return codes

    async def add(self, user_id: str, role_id: str) -> None:
        self.db.add(UserRole(user_id=user_id, role_id=role_id))
        await self.db.flush()

    async def add_many(self, role_id: str, user_ids: Iterable[str]) -> int:
        rows = [UserRole(user_id=u, role_id=role_id) for u in set(user_ids)]
        if not rows:
            return 0
        self.db.add_all(rows)
        await self.db.flush()
        return len(rows)

    async def remove_many(self, role_id: str, user_ids: Iterable[str]) -> int:
        wanted = set(user_ids)
        if not wanted:
            return 0
        result = await self.db.execute(
            delete(UserRole).where(
                UserRole.role_id == role_id, UserRole.user_id.in_(wanted)
            )
        )
        return result.rowcount or 0

    async def delete_by_role(self, role_id: str) -> int:
        result = await self.db.execute(delete(UserRole).where(UserRole.role_id == role_id))
        return result.rowcount or 0

    async def delete_by_users(self, user_ids: Iterable[str]) -> int:
        wanted = set(user_ids)
        if not wanted:
            return 0
        result = await self.db.execute(delete(UserRole).where(UserRole.user_id.in_(wanted)))
        return result.rowcount or 0

    async def delete_orphans(self) -> int:
        """Delete rows whose user or role no longer exists."""
        result = await self.db.execute(
            delete(UserRole)
            .where(
                or_(
                    UserRole.user_id.not_in(select(User.id)),
                    UserRole.role_id.not_in(select(Role.id)),
                )
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
