"""Tests for the health endpoint."""

import pytest
from httpx import AsyncClient


class BrokenSession:
    async def __aenter__(self):
        raise ConnectionError("database unavailable")

    async def __aexit__(self, *exc):
        return False


@pytest.mark.asyncio
async def test_health_reports_database(client: AsyncClient):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "database": True}


@pytest.mark.asyncio
async def test_health_unhealthy_when_database_unreachable(client: AsyncClient, stores):
    stores.session_maker = lambda: BrokenSession()

    response = await client.get("/health")

    assert response.status_code == 503
    assert response.json() == {"status": "unhealthy", "database": False}
