"""Tests for AuthService: login populates the Session Authority Cache, logout clears it."""

import pytest

from rbac_console.application.services import AuthorizationService, AuthService, UserService
from rbac_console.core.config import get_settings
from rbac_console.domain.exceptions import AuthenticationException
from rbac_console.infrastructure.cache import SessionAuthorityCache, session_authority_key
from rbac_console.infrastructure.persistence import UnitOfWorkFactory
from rbac_console.infrastructure.security import BcryptPasswordHasher, JwtTokenService
from tests.conftest import DEFAULT_ROLE, TEST_PASSWORD


@pytest.fixture
def tokens() -> JwtTokenService:
    return JwtTokenService(get_settings())


@pytest.fixture
def auth(
    uow: UnitOfWorkFactory,
    hasher: BcryptPasswordHasher,
    tokens: JwtTokenService,
    session_cache: SessionAuthorityCache,
) -> AuthService:
    return AuthService(uow, hasher, tokens, session_cache)


async def test_login_caches_current_roles_and_issues_token(
    auth: AuthService,
    tokens: JwtTokenService,
    session_cache: SessionAuthorityCache,
    redis_client,
    built_in,
    make_user,
) -> None:
    alice = await make_user("alice")

    result = await auth.login("alice", TEST_PASSWORD)

    assert result.user_id == alice.id
    assert result.roles == frozenset({DEFAULT_ROLE})
    assert result.token_type == "bearer"
    assert await session_cache.read(alice.id) == {DEFAULT_ROLE}
    assert 0 < await redis_client.ttl(session_authority_key(alice.id)) <= result.expires_in
    identity = tokens.resolve(result.access_token)
    assert (identity.user_id, identity.username, identity.domain) == (alice.id, "alice", "built-in")


async def test_login_by_email(auth: AuthService, built_in, make_user) -> None:
    alice = await make_user("alice", email="alice@example.com")
    result = await auth.login("alice@example.com", TEST_PASSWORD)
    assert result.user_id == alice.id


async def test_relogin_drops_roles_revoked_since_previous_login(
    auth: AuthService,
    authz: AuthorizationService,
    session_cache: SessionAuthorityCache,
    built_in,
    make_role,
    make_user,
) -> None:
    r1 = await make_role("R1")
    alice = await make_user("alice")
    await authz.sync_users(r1.id, [alice.id])
    await auth.login("alice", TEST_PASSWORD)
    assert await session_cache.read(alice.id) == {DEFAULT_ROLE, "R1"}

    # Revoke directly in the relational store so no resync reaches the cache.
    async with authz.uow.transaction() as repos:
        await repos.user_roles.remove_many(r1.id, [alice.id])
    await session_cache.refresh(alice.id, {DEFAULT_ROLE, "R1", "STALE"}, 60)

    result = await auth.login("alice", TEST_PASSWORD)

    assert result.roles == frozenset({DEFAULT_ROLE})
    assert await session_cache.read(alice.id) == {DEFAULT_ROLE}


@pytest.mark.parametrize(
    ("identifier", "password"),
    [("alice", "wrong-password"), ("nobody", TEST_PASSWORD)],
)
async def test_login_rejects_bad_credentials(
    auth: AuthService, built_in, make_user, identifier: str, password: str
) -> None:
    await make_user("alice")
    with pytest.raises(AuthenticationException, match="Invalid credentials"):
        await auth.login(identifier, password)


async def test_login_rejects_disabled_user(
    auth: AuthService,
    uow: UnitOfWorkFactory,
    hasher: BcryptPasswordHasher,
    session_cache: SessionAuthorityCache,
    built_in,
) -> None:
    bob = await UserService(uow, hasher, DEFAULT_ROLE).create_user(
        "bob", TEST_PASSWORD, "built-in", "Bob", status="DISABLED"
    )
    with pytest.raises(AuthenticationException, match="disabled"):
        await auth.login("bob", TEST_PASSWORD)
    assert await session_cache.read(bob.id) == set()


async def test_logout_invalidates_cache(
    auth: AuthService, session_cache: SessionAuthorityCache, built_in, make_user
) -> None:
    alice = await make_user("alice")
    await auth.login("alice", TEST_PASSWORD)

    await auth.logout(alice.id)

    assert await session_cache.read(alice.id) == set()
