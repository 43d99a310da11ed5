"""Tests for domain, role, user and menu CRUD over HTTP."""

import pytest
from httpx import AsyncClient

from rbac_console.infrastructure.authorization import CasbinPolicyStore
from tests.conftest import BUILT_IN, DEFAULT_ROLE

MENU = {"menu_name": "system", "route_name": "system", "route_path": "/system", "component": "layout"}


async def test_domain_create_update_delete(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    created = await client.post(
        "/api/v1/domains", json={"code": "acme", "name": "Acme"}, headers=admin_headers
    )
    assert created.status_code == 201
    domain = created.json()
    assert domain["code"] == "acme"
    assert domain["status"] == "ENABLED"

    updated = await client.put(
        f"/api/v1/domains/{domain['id']}",
        json={"code": "acme", "name": "Acme Corp", "status": "DISABLED"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["name"] == "Acme Corp"
    assert updated.json()["status"] == "DISABLED"

    deleted = await client.delete(f"/api/v1/domains/{domain['id']}", headers=admin_headers)
    assert deleted.status_code == 204
    again = await client.delete(f"/api/v1/domains/{domain['id']}", headers=admin_headers)
    assert again.status_code == 404


async def test_duplicate_domain_code_is_409(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/domains", json={"code": BUILT_IN, "name": "Again"}, headers=admin_headers
    )
    assert response.status_code == 409
    assert response.json()["error"] == "CONFLICT"


async def test_domain_code_with_separator_characters_is_422(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/domains", json={"code": "a b", "name": "Bad"}, headers=admin_headers
    )
    assert response.status_code == 422


async def test_role_create_with_parent_and_self_parent_update(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    parent = await client.post(
        "/api/v1/roles", json={"code": "PARENT", "name": "Parent"}, headers=admin_headers
    )
    assert parent.status_code == 201
    assert parent.json()["pid"] == "0"
    child = await client.post(
        "/api/v1/roles",
        json={"id": "child-role", "code": "CHILD", "name": "Child", "pid": parent.json()["id"]},
        headers=admin_headers,
    )
    assert child.status_code == 201
    assert child.json()["id"] == "child-role"

    response = await client.put(
        "/api/v1/roles/child-role",
        json={"code": "CHILD", "name": "Child", "pid": "child-role"},
        headers=admin_headers,
    )
    assert response.status_code == 409
    assert response.json()["details"] == {"resource_type": "role", "resource_id": "child-role"}


async def test_role_unknown_parent_is_404(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/roles",
        json={"code": "ORPHAN", "name": "Orphan", "pid": "ghost"},
        headers=admin_headers,
    )
    assert response.status_code == 404


async def test_role_delete_drops_policies(
    client: AsyncClient, admin_headers: dict[str, str], policy_store: CasbinPolicyStore
) -> None:
    role = await client.post(
        "/api/v1/roles", json={"code": "TEMP", "name": "Temp"}, headers=admin_headers
    )
    await policy_store.add_permission("TEMP", "menu", "create", BUILT_IN)

    response = await client.delete(f"/api/v1/roles/{role.json()['id']}", headers=admin_headers)

    assert response.status_code == 204
    assert policy_store.get_filtered_policy(0, "TEMP") == []


async def test_user_create_update_delete(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    created = await client.post(
        "/api/v1/users",
        json={
            "username": "carol",
            "password": "Secret123!",
            "domain": BUILT_IN,
            "nick_name": "Carol",
            "email": "carol@example.com",
        },
        headers=admin_headers,
    )
    assert created.status_code == 201
    user = created.json()
    assert "password" not in user
    assert user["domain"] == BUILT_IN

    login = await client.post(
        "/api/v1/auth/login", json={"identifier": "carol@example.com", "password": "Secret123!"}
    )
    assert login.json()["roles"] == [DEFAULT_ROLE]

    updated = await client.put(
        f"/api/v1/users/{user['id']}",
        json={"username": "carol", "nick_name": "Caz"},
        headers=admin_headers,
    )
    assert updated.status_code == 200
    assert updated.json()["nick_name"] == "Caz"

    assert (await client.delete(f"/api/v1/users/{user['id']}", headers=admin_headers)).status_code == 204
    assert (await client.delete(f"/api/v1/users/{user['id']}", headers=admin_headers)).status_code == 404


async def test_user_duplicate_username_is_409(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/users",
        json={"username": "admin", "password": "Secret123!", "domain": BUILT_IN, "nick_name": "A"},
        headers=admin_headers,
    )
    assert response.status_code == 409


async def test_user_unknown_domain_is_404(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    response = await client.post(
        "/api/v1/users",
        json={"username": "dave", "password": "Secret123!", "domain": "nowhere", "nick_name": "D"},
        headers=admin_headers,
    )
    assert response.status_code == 404


async def test_menu_tree_rules(client: AsyncClient, admin_headers: dict[str, str]) -> None:
    parent = await client.post("/api/v1/menus", json=MENU, headers=admin_headers)
    assert parent.status_code == 201
    parent_id = parent.json()["id"]
    child = await client.post(
        "/api/v1/menus",
        json={**MENU, "route_name": "users", "route_path": "/system/users", "pid": parent_id},
        headers=admin_headers,
    )
    child_id = child.json()["id"]

    self_parent = await client.put(
        f"/api/v1/menus/{child_id}", json={**MENU, "pid": child_id}, headers=admin_headers
    )
    assert self_parent.status_code == 409

    blocked = await client.delete(f"/api/v1/menus/{parent_id}", headers=admin_headers)
    assert blocked.status_code == 409

    assert (await client.delete(f"/api/v1/menus/{child_id}", headers=admin_headers)).status_code == 204
    assert (await client.delete(f"/api/v1/menus/{parent_id}", headers=admin_headers)).status_code == 204


async def test_menu_with_explicit_id_conflicts_on_reuse(
    client: AsyncClient, admin_headers: dict[str, str]
) -> None:
    first = await client.post("/api/v1/menus", json={**MENU, "id": 42}, headers=admin_headers)
    assert first.status_code == 201
    assert first.json()["id"] == 42
    second = await client.post("/api/v1/menus", json={**MENU, "id": 42}, headers=admin_headers)
    assert second.status_code == 409


@pytest.mark.parametrize(
    ("method", "path"),
    [
        ("POST", "/api/v1/domains"),
        ("POST", "/api/v1/roles"),
        ("POST", "/api/v1/users"),
        ("POST", "/api/v1/menus"),
        ("DELETE", "/api/v1/roles/any"),
        ("DELETE", "/api/v1/menus/1"),
    ],
)
async def test_mutations_require_token(client: AsyncClient, method: str, path: str) -> None:
    response = await client.request(method, path, json={})
    assert response.status_code == 401
    assert response.json()["error"] == "AUTHENTICATION_ERROR"
