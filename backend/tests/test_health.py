"""
AuthGate Backend — Health, Index and Error Shape Tests
=======================================================
"""

from unittest.mock import AsyncMock

import pytest


@pytest.mark.asyncio
async def test_health_reports_connected_database(test_client):
    response = await test_client.get("/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database"] == "connected"
    assert body["uptime_seconds"] >= 0


@pytest.mark.asyncio
async def test_health_is_503_when_database_unreachable(app, test_client):
    app.state.database.ping = AsyncMock(return_value=False)

    response = await test_client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "unhealthy"


@pytest.mark.asyncio
async def test_api_index_lists_auth_endpoints(test_client):
    response = await test_client.get("/api")

    assert response.status_code == 200
    routes = {(e["method"], e["path"]) for e in response.json()["endpoints"]}
    assert ("POST", "/api/auth/register") in routes
    assert ("POST", "/api/auth/login") in routes
    assert ("GET", "/health") in routes


@pytest.mark.asyncio
async def test_unknown_route_uses_error_shape(test_client):
    response = await test_client.get("/api/nope")

    assert response.status_code == 404
    body = response.json()
    assert body["error"] == "not_found"
    assert set(body) == {"error", "message", "errors", "request_id"}


@pytest.mark.asyncio
async def test_request_id_is_echoed_or_generated(test_client):
    echoed = await test_client.get("/api", headers={"X-Request-ID": "trace-42"})
    generated = await test_client.get("/api", headers={"X-Request-ID": "bad id with spaces"})

    assert echoed.headers["x-request-id"] == "trace-42"
    assert generated.headers["x-request-id"] != "bad id with spaces"
    assert len(generated.headers["x-request-id"]) == 8


@pytest.mark.asyncio
async def test_error_body_carries_request_id(test_client):
    response = await test_client.get("/api/auth/me", headers={"X-Request-ID": "req-7"})

    assert response.status_code == 401
    assert response.json()["request_id"] == "req-7"
