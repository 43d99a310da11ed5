"""Pytest configuration and fixtures for rbac-console.

Required env is set before any rbac_console import so Settings validates.
Service and API tests share one in-memory SQLite engine per test (StaticPool
keeps its single connection alive), the casbin policy store on that engine and
a fakeredis-backed Session Authority Cache. HTTP tests drive create_app()
through httpx ASGITransport, which does not run the lifespan, so app.state
is wired here.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")

from collections.abc import AsyncIterator, Callable, Coroutine
from typing import Any

import pytest
from fakeredis import FakeAsyncRedis
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from rbac_console.api.v1.dependencies import get_password_hasher
from rbac_console.api.v1.route_scan import collect_endpoints
from rbac_console.application.dtos import DomainResult, EndpointDescriptor, RoleResult, UserResult
from rbac_console.application.services import (
    AuthorizationService,
    CascadeService,
    DomainService,
    EndpointCatalogService,
    RoleService,
    ScopeLocks,
    UserService,
)
from rbac_console.core.config import get_settings
from rbac_console.core.limiter import limiter
from rbac_console.infrastructure.authorization import CasbinPolicyStore
from rbac_console.infrastructure.cache import SessionAuthorityCache
from rbac_console.infrastructure.persistence import Base, UnitOfWorkFactory
from rbac_console.infrastructure.security import BcryptPasswordHasher
from rbac_console.main import create_app

BUILT_IN = "built-in"
DEFAULT_ROLE = "ROLE_USER"
TEST_PASSWORD = "TestPassword123!"

get_settings.cache_clear()
limiter.enabled = False


def descriptor(resource: str, action: str, method: str = "POST") -> EndpointDescriptor:
    """Catalog entry for tests; id is readable (resource:action)."""
    return EndpointDescriptor(
        id=f"{resource}:{action}",
        path=f"/api/v1/{resource}/{action}",
        method=method,
        action=action,
        resource=resource,
        controller=resource,
        summary=f"{action} {resource}",
    )


@pytest.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest.fixture
def uow(session_factory: async_sessionmaker[AsyncSession]) -> UnitOfWorkFactory:
    return UnitOfWorkFactory(session_factory)


@pytest.fixture
async def policy_store(engine: AsyncEngine) -> AsyncIterator[CasbinPolicyStore]:
    store = await CasbinPolicyStore.open(engine, timeout_seconds=5.0)
    yield store
    await store.close()


@pytest.fixture
async def redis_client() -> AsyncIterator[FakeAsyncRedis]:
    client = FakeAsyncRedis(decode_responses=True)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def session_cache(redis_client: FakeAsyncRedis) -> SessionAuthorityCache:
    return SessionAuthorityCache(redis_client=redis_client)


@pytest.fixture
def scope_locks() -> ScopeLocks:
    return ScopeLocks()


@pytest.fixture
def hasher() -> BcryptPasswordHasher:
    """Minimum bcrypt cost keeps hashing fast in tests."""
    return BcryptPasswordHasher(rounds=4)


@pytest.fixture
def authz(
    uow: UnitOfWorkFactory,
    policy_store: CasbinPolicyStore,
    session_cache: SessionAuthorityCache,
    scope_locks: ScopeLocks,
) -> AuthorizationService:
    return AuthorizationService(uow, policy_store, session_cache, scope_locks)


@pytest.fixture
def cascade(
    uow: UnitOfWorkFactory,
    policy_store: CasbinPolicyStore,
    session_cache: SessionAuthorityCache,
    scope_locks: ScopeLocks,
) -> CascadeService:
    return CascadeService(uow, policy_store, session_cache, scope_locks)


@pytest.fixture
async def built_in(uow: UnitOfWorkFactory, policy_store: CasbinPolicyStore) -> DomainResult:
    """The built-in domain plus the enabled default role new users receive."""
    domain = await DomainService(uow, policy_store).create_domain(BUILT_IN, "Built-in")
    await RoleService(uow).create_role(DEFAULT_ROLE, "User")
    return domain


@pytest.fixture
def make_role(uow: UnitOfWorkFactory) -> Callable[..., Coroutine[Any, Any, RoleResult]]:
    async def _make(code: str, **kwargs: Any) -> RoleResult:
        return await RoleService(uow).create_role(code, f"{code} role", **kwargs)

    return _make


@pytest.fixture
def make_user(
    uow: UnitOfWorkFactory, hasher: BcryptPasswordHasher
) -> Callable[..., Coroutine[Any, Any, UserResult]]:
    async def _make(username: str, domain: str = BUILT_IN, **kwargs: Any) -> UserResult:
        return await UserService(uow, hasher, DEFAULT_ROLE).create_user(
            username, TEST_PASSWORD, domain, username.title(), **kwargs
        )

    return _make


@pytest.fixture
async def menu_catalog(uow: UnitOfWorkFactory) -> list[EndpointDescriptor]:
    """Endpoints for the menu resource: read, write, delete."""
    descriptors = [descriptor("menu", "read"), descriptor("menu", "write"), descriptor("menu", "delete")]
    await EndpointCatalogService(uow).rebuild(descriptors)
    return descriptors


@pytest.fixture
def app(
    uow: UnitOfWorkFactory,
    policy_store: CasbinPolicyStore,
    session_cache: SessionAuthorityCache,
    scope_locks: ScopeLocks,
    hasher: BcryptPasswordHasher,
) -> FastAPI:
    application = create_app()
    application.state.uow = uow
    application.state.policy_store = policy_store
    application.state.session_cache = session_cache
    application.state.scope_locks = scope_locks
    application.dependency_overrides[get_password_hasher] = lambda: hasher
    return application


@pytest.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def admin_headers(
    app: FastAPI,
    client: AsyncClient,
    uow: UnitOfWorkFactory,
    authz: AuthorizationService,
    built_in: DomainResult,
    make_role: Callable[..., Coroutine[Any, Any, RoleResult]],
    make_user: Callable[..., Coroutine[Any, Any, UserResult]],
) -> dict[str, str]:
    """Log in as a super admin holding every catalogued endpoint in built-in.

    The catalog is rebuilt from the app's own route table, as at start-up.
    """
    descriptors = collect_endpoints(app)
    await EndpointCatalogService(uow).rebuild(descriptors)
    super_role = await make_role("ROLE_SUPER")
    admin = await make_user("admin")
    await authz.sync_users(super_role.id, [admin.id])
    await authz.sync_permissions(BUILT_IN, super_role.id, [d.id for d in descriptors])
    resp = await client.post(
        "/api/v1/auth/login", json={"identifier": "admin", "password": TEST_PASSWORD}
    )
    assert resp.status_code == 200, resp.text
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
