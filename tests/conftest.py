"""Pytest configuration and fixtures for API tests."""
import os

# Set test env BEFORE any imports that use config
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["INITIAL_API_KEYS"] = "test-key,second-key"
os.environ["BCRYPT_ROUNDS"] = "10"

import pytest
from httpx import ASGITransport, AsyncClient

import config
from store.keys import seed_api_keys
from store.models.base import engine, init_db
from web.api.main import app

API_KEY = "test-key"


@pytest.fixture(autouse=True)
async def _init_db():
    """Fresh database per test (ASGI lifespan doesn't run with httpx)."""
    await init_db()
    await seed_api_keys(config.INITIAL_API_KEYS)
    yield
    # Disposing the in-memory engine drops every table with it
    await engine.dispose()


@pytest.fixture
async def client():
    """Async HTTP client for testing the API."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def api_headers():
    """Headers carrying a seeded API key for gated endpoints."""
    return {"X-API-Key": API_KEY}


@pytest.fixture
async def registered_user(client, api_headers):
    """Register alice123 and return the payload used."""
    payload = {"username": "alice123", "password": "supersecret", "discord_user_id": "d1"}
    r = await client.post("/register", json=payload, headers=api_headers)
    assert r.status_code == 201, f"Register failed: {r.text}"
    return payload
