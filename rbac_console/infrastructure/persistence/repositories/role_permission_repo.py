"""RolePermission repository: role-endpoint grants per domain (single entity responsibility)."""

from collections.abc import Iterable

from sqlalchemy import delete, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from rbac_console.infrastructure.persistence.models.domain import Domain
from rbac_console.infrastructure.persistence.models.endpoint import Endpoint
from rbac_console.infrastructure.persistence.models.relations import RolePermission
from rbac_console.infrastructure.persistence.models.role import Role


class RolePermissionRepository:
    """Role-permission link table only. Policy tuples are derived from these rows."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def endpoint_ids_for(self, role_id: str, domain: str) -> set[str]:
        result = await self.db.execute(
            select(RolePermission.endpoint_id).where(
                RolePermission.role_id == role_id, RolePermission.domain == domain
            )
        )
        return set(result.scalars().all())

    async def grants_for(self, role_id: str, domain: str) -> set[tuple[str, str]]:
        """Return the (resource, action) pairs granted to role_id in domain."""
        result = await self.db.execute(
            select(Endpoint.resource, Endpoint.action)
            .join(RolePermission, RolePermission.endpoint_id == Endpoint.id)
            .where(RolePermission.role_id == role_id, RolePermission.domain == domain)
        )
        return {(row.resource, row.action) for row in result.all()}

    async def grants_by_scope(self) -> dict[tuple[str, str], set[tuple[str, str]]]:
        """Return desired (resource, action) pairs keyed by (role code, domain).

        Only rows whose role and endpoint exist contribute.
        """
        result = await self.db.execute(
            select(Role.code, RolePermission.domain, Endpoint.resource, Endpoint.action)
            .join(Role, Role.id == RolePermission.role_id)
            .join(Endpoint, Endpoint.id == RolePermission.endpoint_id)
        )
        grants: dict[tuple[str, str], set[tuple[str, str]]] = {}
        for row in result.all():
            grants.setdefault((row.code, row.domain), set()).add((row.resource, row.action))
        return grants

    async def add_many(self, role_id: str, domain: str, endpoint_ids: Iterable[str]) -> int:
        rows = [
            RolePermission(role_id=role_id, endpoint_id=e, domain=domain)
            for e in set(endpoint_ids)
        ]
        if not rows:
            return 0
        self.db.add_all(rows)
        await self.db.flush()
        return len(rows)

    async def remove_many(self, role_id: str, domain: str, endpoint_ids: Iterable[str]) -> int:
        wanted = set(endpoint_ids)
        if not wanted:
            return 0
        result = await self.db.execute(
            delete(RolePermission).where(
                RolePermission.role_id == role_id,
                RolePermission.domain == domain,
                RolePermission.endpoint_id.in_(wanted),
            )
        )
        return result.rowcount or 0

    async def exists_for_domain(self, domain: str) -> bool:
        result = await self.db.execute(
            select(RolePermission.role_id).where(RolePermission.domain == domain).limit(1)
        )
        return result.first() is not None

    async def delete_by_role(self, role_id: str) -> int:
        result = await self.db.execute(
            delete(RolePermission).where(RolePermission.role_id == role_id)
        )
        return result.rowcount or 0

    async def delete_by_domain(self, domain: str) -> int:
        result = await self.db.execute(
            delete(RolePermission).where(RolePermission.domain == domain)
        )
        return result.rowcount or 0

    async def delete_by_endpoints(self, endpoint_ids: Iterable[str]) -> int:
        wanted = set(endpoint_ids)
        if not wanted:
            return 0
        result = await self.db.execute(
            delete(RolePermission).where(RolePermission.endpoint_id.in_(wanted))
        )
        return result.rowcount or 0

    async def delete_orphans(self) -> int:
        """Delete rows whose role, endpoint or domain no longer exists."""
        result = await self.db.execute(
            delete(RolePermission)
            .where(
                or_(
                    RolePermission.role_id.not_in(select(Role.id)),
                    RolePermission.endpoint_id.not_in(select(Endpoint.id)),
                    RolePermission.domain.not_in(select(Domain.code)),
                )
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
