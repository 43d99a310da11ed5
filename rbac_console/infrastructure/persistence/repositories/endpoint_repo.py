"""Endpoint repository: the permission catalog."""

from collections.abc import Iterable

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_console.application.dtos.endpoint import EndpointDescriptor
from rbac_console.infrastructure.persistence.models.endpoint import Endpoint
from rbac_console.infrastructure.persistence.repositories.base import BaseRepository


class EndpointRepository(BaseRepository[Endpoint]):
    """Catalog rows keyed by the deterministic endpoint id."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Endpoint)

    async def get_map(self) -> dict[str, Endpoint]:
        """Return every catalog row keyed by id."""
        result = await self.db.execute(select(Endpoint))
        return {e.id: e for e in result.scalars().all()}

    async def grants_for_ids(self, endpoint_ids: Iterable[str]) -> set[tuple[str, str]]:
        """Return the (resource, action) pairs of the given endpoints."""
        wanted = set(endpoint_ids)
        if not wanted:
            return set()
        result = await self.db.execute(
            select(Endpoint.resource, Endpoint.action).where(Endpoint.id.in_(wanted))
        )
        return {(row.resource, row.action) for row in result.all()}

    def add_descriptor(self, descriptor: EndpointDescriptor) -> None:
        self.db.add(
            Endpoint(
                id=descriptor.id,
                path=descriptor.path,
                method=descriptor.method,
                action=descriptor.action,
                resource=descriptor.resource,
                controller=descriptor.controller,
                summary=descriptor.summary,
            )
        )

    @staticmethod
    def apply_descriptor(row: Endpoint, descriptor: EndpointDescriptor) -> bool:
        """Copy descriptor fields onto row; return True when anything changed."""
        changed = False
        for field in ("path", "method", "action", "resource", "controller", "summary"):
            value = getattr(descriptor, field)
            if getattr(row, field) != value:
                setattr(row, field, value)
                changed = True
        return changed

    async def delete_ids(self, endpoint_ids: Iterable[str]) -> int:
        wanted = set(endpoint_ids)
        if not wanted:
            return 0
        result = await self.db.execute(delete(Endpoint).where(Endpoint.id.in_(wanted)))
        return result.rowcount or 0
