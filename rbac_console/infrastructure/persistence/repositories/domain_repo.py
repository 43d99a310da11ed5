"""Domain repository. Read methods return DomainResult; entity getters return ORM for writes."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_console.application.dtos.domain import DomainResult
from rbac_console.infrastructure.persistence.models.domain import Domain
from rbac_console.infrastructure.persistence.repositories.base import BaseRepository


def domain_to_result(d: Domain) -> DomainResult:
    """Map ORM Domain to application DomainResult."""
    return DomainResult(
        id=d.id,
        code=d.code,
        name=d.name,
        description=d.description,
        status=d.status,
    )


class DomainRepository(BaseRepository[Domain]):
    """Domain repository: lookups by code and the set of live domain codes."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Domain)

    async def get_by_code(self, code: str) -> Domain | None:
        result = await self.db.execute(select(Domain).where(Domain.code == code))
        return result.scalar_one_or_none()

    async def code_exists(self, code: str, *, exclude_id: str | None = None) -> bool:
        stmt = select(Domain.id).where(Domain.code == code)
        if exclude_id is not None:
            stmt = stmt.where(Domain.id != exclude_id)
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def all_codes(self) -> set[str]:
        result = await self.db.execute(select(Domain.code))
        return set(result.scalars().all())

    async def create_domain(
        self,
        code: str,
        name: str,
        description: str | None,
        status: str,
        created_by: str | None = None,
    ) -> DomainResult:
        """Create a domain; return read-model DTO."""
        domain = Domain(
            code=code,
            name=name,
            description=description,
            status=status,
            created_by=created_by,
        )
        return domain_to_result(await self.create(domain))

    async def save(self, domain: Domain) -> DomainResult:
        """Flush changes made to a domain loaded in this session; return read-model DTO."""
        return domain_to_result(await self.update(domain))
