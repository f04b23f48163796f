"""Health and readiness endpoints, plus request ID propagation."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


async def test_readiness_without_collaborators(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "firestore": False, "sitemap_cache": False}


async def test_request_id_is_generated(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert len(response.headers["X-Request-ID"]) == 36


async def test_request_id_is_forwarded_when_safe(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "trace-123"})
    assert response.headers["X-Request-ID"] == "trace-123"


async def test_unsafe_request_id_is_replaced(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "bad id\r\ninjected"})
    assert response.headers["X-Request-ID"] != "bad id\r\ninjected"
    assert len(response.headers["X-Request-ID"]) == 36
