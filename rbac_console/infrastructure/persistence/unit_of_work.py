"""Repository bundle bound to one session, and the factory services use to open one.

Services receive a UnitOfWorkFactory and open either a transaction (all
relational mutations of one operation commit or roll back together) or a
read-only session.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from rbac_console.infrastructure.persistence.database import read_session, unit_of_work
from rbac_console.infrastructure.persistence.repositories import (
    DomainRepository,
    EndpointRepository,
    MenuRepository,
    RoleMenuRepository,
    RolePermissionRepository,
    RoleRepository,
    UserRepository,
    UserRoleRepository,
)


class Repositories:
    """Every repository of the authorization core, sharing one session."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.domains = DomainRepository(session)
        self.roles = RoleRepository(session)
        self.users = UserRepository(session)
        self.menus = MenuRepository(session)
        self.endpoints = EndpointRepository(session)
        self.role_menus = RoleMenuRepository(session)
        self.user_roles = UserRoleRepository(session)
        self.role_permissions = RolePermissionRepository(session)


class UnitOfWorkFactory:
    """Opens repository bundles over a session factory."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self.session_factory = session_factory

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Repositories]:
        """Yield repositories inside one transaction (commit on exit, rollback on error)."""
        async with unit_of_work(self.session_factory) as session:
            yield Repositories(session)

    @asynccontextmanager
    async def reader(self) -> AsyncIterator[Repositories]:
        """Yield repositories over a session used for reads only."""
        async with read_session(self.session_factory) as session:
            yield Repositories(session)
