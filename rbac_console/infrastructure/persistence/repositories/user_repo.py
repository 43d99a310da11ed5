"""User repository. Lookups by username/email/phone and per-domain id sets."""

from typing import Any

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_console.application.dtos.user import UserResult
from rbac_console.infrastructure.persistence.models.user import User
from rbac_console.infrastructure.persistence.repositories.base import BaseRepository


def user_to_result(u: User) -> UserResult:
    """Map ORM User to application UserResult (password hash is not carried)."""
    return UserResult(
        id=u.id,
        username=u.username,
        domain=u.domain,
        nick_name=u.nick_name,
        avatar=u.avatar,
        email=u.email,
        phone_number=u.phone_number,
        status=u.status,
    )


class UserRepository(BaseRepository[User]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, User)

    async def get_by_username(self, username: str) -> User | None:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalar_one_or_none()

    async def find_by_identifier(self, identifier: str) -> User | None:
        """Return the user whose username, email or phone number equals identifier."""
        result = await self.db.execute(
            select(User)
            .where(
                or_(
                    User.username == identifier,
                    User.email == identifier,
                    User.phone_number == identifier,
                )
            )
            .limit(1)
        )
        return result.scalars().first()

    async def username_exists(self, username: str, *, exclude_id: str | None = None) -> bool:
        stmt = select(User.id).where(User.username == username)
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def ids_in_domain(self, domain: str) -> set[str]:
        result = await self.db.execute(select(User.id).where(User.domain == domain))
        return set(result.scalars().all())

    async def delete_in_domain(self, domain: str) -> int:
        """Bulk delete every user whose home domain is domain; return rows deleted."""
        result = await self.db.execute(delete(User).where(User.domain == domain))
        return result.rowcount or 0

    async def create_user(self, **fields: Any) -> UserResult:
        """Create a user from column values; return read-model DTO."""
        return user_to_result(await self.create(User(**fields)))

    async def save(self, user: User) -> UserResult:
        return user_to_result(await self.update(user))
