"""Tests for login and logout over HTTP."""

from httpx import AsyncClient

from rbac_console.infrastructure.cache import SessionAuthorityCache
from tests.conftest import DEFAULT_ROLE, TEST_PASSWORD


async def test_login_returns_token_and_roles(client: AsyncClient, built_in, make_user) -> None:
    alice = await make_user("alice")
    response = await client.post(
        "/api/v1/auth/login", json={"identifier": "alice", "password": TEST_PASSWORD}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["user_id"] == alice.id
    assert data["roles"] == [DEFAULT_ROLE]
    assert data["expires_in"] > 0
    assert data["access_token"]


async def test_login_wrong_password_is_401(client: AsyncClient, built_in, make_user) -> None:
    await make_user("alice")
    response = await client.post(
        "/api/v1/auth/login", json={"identifier": "alice", "password": "nope"}
    )
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"


async def test_login_missing_fields_is_422(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/login", json={"identifier": "alice"})
    assert response.status_code == 422
    assert response.json()["error"] == "VALIDATION_ERROR"


async def test_logout_clears_cached_authority(
    client: AsyncClient, session_cache: SessionAuthorityCache, built_in, make_user
) -> None:
    alice = await make_user("alice")
    login = await client.post(
        "/api/v1/auth/login", json={"identifier": "alice", "password": TEST_PASSWORD}
    )
    headers = {"Authorization": f"Bearer {login.json()['access_token']}"}
    assert await session_cache.read(alice.id) == {DEFAULT_ROLE}

    response = await client.post("/api/v1/auth/logout", headers=headers)

    assert response.status_code == 204
    assert await session_cache.read(alice.id) == set()


async def test_logout_without_token_is_401(client: AsyncClient) -> None:
    response = await client.post("/api/v1/auth/logout")
    assert response.status_code == 401


async def test_garbage_token_is_401(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/auth/logout", headers={"Authorization": "Bearer not-a-jwt"}
    )
    assert response.status_code == 401
