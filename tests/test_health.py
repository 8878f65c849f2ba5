"""
Tests for the /health, / and /api/security/metrics endpoints.

All tests run without a live MongoDB (db is mocked as disconnected in conftest).
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from careertools.core.config import settings


@pytest.mark.asyncio
async def test_health_returns_200(client):
    """Health endpoint must always return 200 if the API process is alive."""
    response = await client.get("/health")
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_health_response_schema(client):
    data = (await client.get("/health")).json()

    assert data["status"] == "ok"
    assert data["version"] == "0.1.0"
    assert data["environment"] == "test"
    assert data["aiMode"] == "mock"
    assert data["database"] == "not configured"


@pytest.mark.asyncio
async def test_health_reports_mongo_state_when_configured(client):
    import careertools.core.database as db_module

    with patch.object(settings, "gate_store_backend", "mongo"):
        data = (await client.get("/health")).json()
        assert data["database"] == "disconnected"

        fake_client = MagicMock()
        fake_client.admin.command = AsyncMock(return_value={"ok": 1})
        db_module.db_client.client = fake_client
        data = (await client.get("/health")).json()
        assert data["database"] == "connected"


@pytest.mark.asyncio
async def test_root_endpoint(client):
    """Root / must return API metadata with status=running."""
    response = await client.get("/")
    assert response.status_code == 200

    data = response.json()
    assert data["status"] == "running"
    assert data["name"] == "careertools API"
    assert data["docs"] == "/docs"


@pytest.mark.asyncio
async def test_unknown_route_returns_404(client):
    """Unknown routes should return 404, not 500."""
    response = await client.get("/does-not-exist")
    assert response.status_code == 404


# ── Security metrics ──────────────────────────────────────────────────────────

class TestSecurityMetrics:
    async def test_hidden_without_configured_token(self, client):
        r = await client.get("/api/security/metrics", headers={"X-Metrics-Token": "anything"})
        assert r.status_code == 404

    async def test_wrong_token_is_403(self, client):
        with patch.object(settings, "metrics_token", "s3cret"):
            r = await client.get("/api/security/metrics", headers={"X-Metrics-Token": "guess"})
        assert r.status_code == 403

    async def test_snapshot_after_rejection(self, client, browser):
        await client.post(
            "/api/keyword-extract",
            json={"jobDescription": "irrelevant"},
            headers=browser("198.51.100.90", Origin="https://evil.example"),
        )

        with patch.object(settings, "metrics_token", "s3cret"):
            r = await client.get("/api/security/metrics", headers={"X-Metrics-Token": "s3cret"})

        assert r.status_code == 200
        data = r.json()
        assert data["totalViolations24h"] == 1
        assert data["violationsByKind"] == {"origin-mismatch": 1}
        assert data["suspiciousClients"][0]["clientAddress"] == "198.51.100.90"
        assert data["blockedAddresses"] == []
        assert data["recentViolations"][0]["severity"] == "high"
