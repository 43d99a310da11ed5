"""Tests for the health endpoint."""

from httpx import AsyncClient


async def test_health_reports_backing_stores(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "policy_store": True, "session_cache": True}


async def test_health_needs_no_token(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert "x-request-id" in {k.lower() for k in response.headers}
