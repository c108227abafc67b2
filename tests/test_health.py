"""Smoke tests for health and app wiring."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    data = response.json()
    assert data.get("status") == "ok"


async def test_health_response_carries_request_id_and_no_store(client: AsyncClient) -> None:
    """Every response echoes a request id and forbids caching."""
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-123"})
    assert response.headers.get("x-request-id") == "req-123"
    assert response.headers.get("cache-control") == "no-store"
    assert response.headers.get("x-content-type-options") == "nosniff"


async def test_unsafe_request_id_is_replaced(client: AsyncClient) -> None:
    """A client request id with disallowed characters is replaced by a generated one."""
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "bad id\nx"})
    echoed = response.headers.get("x-request-id")
    assert echoed
    assert echoed != "bad id\nx"
