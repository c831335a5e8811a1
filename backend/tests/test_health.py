"""Smoke tests: the app starts and core endpoints respond."""

import pytest
from httpx import AsyncClient, ASGITransport

from lptagger.database import init_db, drop_db, async_engine
from lptagger.main import app


@pytest.fixture
async def client():
    await init_db()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    await drop_db()
    await async_engine.dispose()


@pytest.mark.asyncio
async def test_health(client):
    r = await client.get("/api/health")
    assert r.status_code == 200
    data = r.json()
    assert data["status"] == "healthy"
    assert "static_root" in data
    assert isinstance(data["static_root_found"], bool)


@pytest.mark.asyncio
async def test_tags_list(client):
    r = await client.get("/api/tags")
    assert r.status_code == 200
    data = r.json()
    assert data["items"] == []
    assert data["total"] == 0


@pytest.mark.asyncio
async def test_openapi_under_api_prefix(client):
    r = await client.get("/api/openapi.json")
    assert r.status_code == 200
    assert "/api/tags" in r.json()["paths"]
