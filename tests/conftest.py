"""
pytest configuration and shared fixtures for the careertools API tests.

Key concern: tests must not require a live MongoDB or Gemini API key.
We achieve this by:
  1. Ensuring AI_MOCK_MODE=true so GeminiClient returns canned responses.
  2. Running with ENVIRONMENT=test so http://localhost:3000 is an allowed
     origin, which is what BROWSER_HEADERS below sends.
  3. Resetting the Request Gate and both rate limiters before every test,
     so a client blocked or throttled in one test never leaks into the next.
"""

import os
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient

# Set env vars BEFORE importing the app so Settings picks them up correctly
os.environ.setdefault("AI_MOCK_MODE", "true")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("GATE_STORE_BACKEND", "memory")

ALLOWED_ORIGIN = "http://localhost:3000"

BROWSER_UA = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/126.0 Safari/537.36"
)

BROWSER_HEADERS = {
    "Origin": ALLOWED_ORIGIN,
    "User-Agent": BROWSER_UA,
}


def browser_headers(address: str = "203.0.113.10", **extra: str) -> dict[str, str]:
    """Headers of a well-behaved browser request from *address*."""
    return {**BROWSER_HEADERS, "X-Forwarded-For": address, **extra}


@pytest.fixture()
def browser():
    """Factory for well-behaved browser headers: browser("198.51.100.7")."""
    return browser_headers


@pytest.fixture(autouse=True)
async def clean_state():
    """Fresh gate store and empty rate-limit counters for every test."""
    from careertools.core.rate_limit import limiter, rate_limiter
    from careertools.security.gate import request_gate

    await request_gate.reset()
    await rate_limiter.reset()
    limiter.reset()
    yield
    await request_gate.reset()


@pytest.fixture(autouse=True)
async def mock_db():
    """
    Keep the app away from MongoDB.

    - connect_to_mongo / close_mongo_connection → no-op AsyncMocks
    - db_client.client and db_client.db → None (health reports no database)
    """
    with (
        patch("careertools.main.connect_to_mongo", new_callable=AsyncMock),
        patch("careertools.main.close_mongo_connection", new_callable=AsyncMock),
    ):
        import careertools.core.database as db_module

        original_client = db_module.db_client.client
        original_db = db_module.db_client.db

        db_module.db_client.client = None
        db_module.db_client.db = None

        yield

        db_module.db_client.client = original_client
        db_module.db_client.db = original_db


@pytest.fixture()
async def client(mock_db):  # noqa: ARG001 — mock_db must run first
    """
    HTTPX async test client wired to the FastAPI app.

    Usage:
        async def test_something(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    from careertools.main import app

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
