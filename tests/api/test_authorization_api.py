"""Tests for the authorization endpoints: assign permissions, routes, users; reconcile."""

import pytest
from httpx import AsyncClient

from rbac_console.api.v1.route_scan import endpoint_id
from rbac_console.infrastructure.authorization import CasbinPolicyStore
from rbac_console.infrastructure.cache import SessionAuthorityCache
from tests.conftest import BUILT_IN, DEFAULT_ROLE, TEST_PASSWORD

CREATE_MENU = endpoint_id("POST", "/api/v1/menus")
DELETE_MENU = endpoint_id("DELETE", "/api/v1/menus/{menu_id}")


async def _create_role(client: AsyncClient, headers: dict[str, str], code: str) -> str:
    response = await client.post(
        "/api/v1/roles", json={"code": code, "name": code}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


async def test_assign_permission_returns_diff_and_writes_policies(
    client: AsyncClient, admin_headers: dict[str, str], policy_store: CasbinPolicyStore
) -> None:
    role_id = await _create_role(client, admin_headers, "EDITOR")

    first = await client.post(
        "/api/v1/authorization/assign-permission",
        json={"domain": BUILT_IN, "role_id": role_id, "permissions": [CREATE_MENU, DELETE_MENU]},
        headers=admin_headers,
    )
    assert first.status_code == 200
    assert first.json() == {
        "added": [
            {"resource": "menu", "action": "create"},
            {"resource": "menu", "action": "delete"},
        ],
        "removed": [],
    }

    second = await client.post(
        "/api/v1/authorization/assign-permission",
        json={"domain": BUILT_IN, "role_id": role_id, "permissions": [CREATE_MENU]},
        headers=admin_headers,
    )
    assert second.json() == {"added": [], "removed": [{"resource": "menu", "action": "delete"}]}
    assert policy_store.get_filtered_policy(0, "EDITOR") == [
        ["EDITOR", "menu", "create", BUILT_IN, "allow"]
    ]

    listed = await client.get(
        f"/api/v1/authorization/roles/{role_id}/permissions",
        params={"domain": BUILT_IN},
        headers=admin_headers,
    )
    assert listed.status_code == 200
    assert listed.json() == [
        {"role": "EDITOR", "resource": "menu", "action": "create", "domain": BUILT_IN, "effect": "allow"}
    ]


async def test_assign_permission_unknown_endpoint_is_404(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    role_id = await _create_role(client, admin_headers, "EDITOR")
    response = await client.post(
        "/api/v1/authorization/assign-permission",
        json={"domain": BUILT_IN, "role_id": role_id, "permissions": ["no-such-endpoint"]},
        headers=admin_headers,
    )
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


@pytest.mark.parametrize(
    ("path", "field"),
    [("assign-permission", "permissions"), ("assign-routes", "route_ids")],
)
async def test_assign_with_empty_list_is_404(
    client: AsyncClient, admin_headers: dict[str, str], path: str, field: str
) -> None:
    role_id = await _create_role(client, admin_headers, "EDITOR")
    response = await client.post(
        f"/api/v1/authorization/{path}",
        json={"domain": BUILT_IN, "role_id": role_id, field: []},
        headers=admin_headers,
    )
    assert response.status_code == 404
    assert response.json()["error"] == "RESOURCE_NOT_FOUND"


async def test_granted_permission_takes_effect_on_next_request(
    client: AsyncClient, admin_headers: dict[str, str], make_user
) -> None:
    """A member's live session gains a new grant without logging in again."""
    role_id = await _create_role(client, admin_headers, "EDITOR")
    bob = await make_user("bob")
    login = await client.post(
        "/api/v1/auth/login", json={"identifier": "bob", "password": TEST_PASSWORD}
    )
    bob_headers = {"Authorization": f"Bearer {login.json()['access_token']}"}
    menu = {"menu_name": "home", "route_name": "home", "route_path": "/home", "component": "layout"}

    denied = await client.post("/api/v1/menus", json=menu, headers=bob_headers)
    assert denied.status_code == 403
    assert denied.json()["error"] == "PERMISSION_DENIED"

    await client.post(
        "/api/v1/authorization/assign-permission",
        json={"domain": BUILT_IN, "role_id": role_id, "permissions": [CREATE_MENU]},
        headers=admin_headers,
    )
    await client.post(
        "/api/v1/authorization/assign-users",
        json={"role_id": role_id, "user_ids": [bob.id]},
        headers=admin_headers,
    )

    allowed = await client.post("/api/v1/menus", json=menu, headers=bob_headers)
    assert allowed.status_code == 201


async def test_assign_users_and_list_members(
    client: AsyncClient,
    admin_headers: dict[str, str],
    session_cache: SessionAuthorityCache,
    make_user,
) -> None:
    role_id = await _create_role(client, admin_headers, "AUDITOR")
    alice = await make_user("alice")
    bob = await make_user("bob")

    response = await client.post(
        "/api/v1/authorization/assign-users",
        json={"role_id": role_id, "user_ids": [alice.id, bob.id]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"added": sorted([alice.id, bob.id]), "removed": []}

    members = await client.get(
        f"/api/v1/authorization/roles/{role_id}/users", headers=admin_headers
    )
    assert members.json() == sorted([alice.id, bob.id])
    # Neither user has logged in, so no cache entry is created.
    assert await session_cache.read(alice.id) == set()


async def test_assign_users_empty_list_is_404(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    role_id = await _create_role(client, admin_headers, "AUDITOR")
    response = await client.post(
        "/api/v1/authorization/assign-users",
        json={"role_id": role_id, "user_ids": []},
        headers=admin_headers,
    )
    assert response.status_code == 404


async def test_assign_routes_and_list(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    role_id = await _create_role(client, admin_headers, "NAV")
    menu_ids = []
    for name in ("home", "about"):
        created = await client.post(
            "/api/v1/menus",
            json={"menu_name": name, "route_name": name, "route_path": f"/{name}", "component": name},
            headers=admin_headers,
        )
        menu_ids.append(created.json()["id"])

    response = await client.post(
        "/api/v1/authorization/assign-routes",
        json={"domain": BUILT_IN, "role_id": role_id, "route_ids": menu_ids},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json() == {"added": sorted(menu_ids), "removed": []}

    routes = await client.get(
        f"/api/v1/authorization/roles/{role_id}/routes",
        params={"domain": BUILT_IN},
        headers=admin_headers,
    )
    assert routes.json() == sorted(menu_ids)


async def test_assign_routes_unknown_role_is_404(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/authorization/assign-routes",
        json={"domain": BUILT_IN, "role_id": "ghost", "route_ids": []},
        headers=admin_headers,
    )
    assert response.status_code == 404


async def test_reconcile_repairs_drift(
    client: AsyncClient, admin_headers: dict[str, str], policy_store: CasbinPolicyStore
) -> None:
    await policy_store.add_permission("NOBODY", "menu", "create", BUILT_IN)

    response = await client.post("/api/v1/authorization/reconcile", headers=admin_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["orphan_policies_removed"] == 1
    assert body["errors"] == []
    assert policy_store.get_filtered_policy(0, "NOBODY") == []


async def test_authorization_endpoints_require_token(client: AsyncClient) -> None:
    response = await client.post(
        "/api/v1/authorization/assign-users", json={"role_id": "r", "user_ids": ["u"]}
    )
    assert response.status_code == 401


async def test_default_role_alone_cannot_reconcile(
    client: AsyncClient, built_in, make_user
) -> None:
    await make_user("bob")
    login = await client.post(
        "/api/v1/auth/login", json={"identifier": "bob", "password": TEST_PASSWORD}
    )
    assert login.json()["roles"] == [DEFAULT_ROLE]
    response = await client.post(
        "/api/v1/authorization/reconcile",
        headers={"Authorization": f"Bearer {login.json()['access_token']}"},
    )
    assert response.status_code == 403
