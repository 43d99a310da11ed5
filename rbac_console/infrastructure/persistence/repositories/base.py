"""Base repository: single-row writes and id-set lookups shared by identity repositories."""

from collections.abc import Iterable
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_console.domain.exceptions import ResourceNotFoundException
from rbac_console.infrastructure.persistence.database import Base


class BaseRepository[ModelType: Base]:
    """Repository over one identity table keyed by an ``id`` column."""

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def get_by_id(self, entity_id: Any) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == entity_id))
        return result.scalar_one_or_none()

    async def exists(self, entity_id: Any) -> bool:
        model: Any = self.model
        result = await self.db.execute(select(model.id).where(model.id == entity_id))
        return result.scalar_one_or_none() is not None

    async def existing_ids(self, ids: Iterable[Any]) -> set[Any]:
        """Return the subset of ids that exist."""
        wanted = set(ids)
        if not wanted:
            return set()
        model: Any = self.model
        result = await self.db.execute(select(model.id).where(model.id.in_(wanted)))
        return set(result.scalars().all())

    async def require_all(self, ids: Iterable[Any], resource_type: str) -> set[Any]:
        """Return ids as a set; raise ResourceNotFoundException naming the first unknown id."""
        wanted = set(ids)
        missing = wanted - await self.existing_ids(wanted)
        if missing:
            raise ResourceNotFoundException(resource_type, str(sorted(missing, key=str)[0]))
        return wanted

    async def create(self, obj: ModelType) -> ModelType:
        """Add obj to the session and flush so generated columns are loaded."""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush changes made to an attached obj and reload server-side values."""
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        await self.db.delete(obj)
        await self.db.flush()
