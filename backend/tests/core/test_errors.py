"""Tests for error rendering."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from starlette.requests import Request

from app.core.errors import unhandled_error_handler
from app.main import app


def make_request(state: dict | None = None) -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "path": "/api/vehicles",
            "headers": [],
            "query_string": b"",
            "state": state or {},
        }
    )


@pytest_asyncio.fixture
async def failing_client(stores):
    """Client for a route that raises an unexpected exception."""

    async def explode():
        raise RuntimeError("database exploded")

    app.state.stores = stores
    app.add_api_route("/api/test-failure", explode)
    route = app.router.routes[-1]

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as ac:
        yield ac

    app.router.routes.remove(route)


@pytest.mark.asyncio
async def test_unhandled_error_carries_request_id_header():
    response = await unhandled_error_handler(make_request({"request_id": "req-500"}), RuntimeError("boom"))

    assert response.status_code == 500
    assert response.headers["X-Request-ID"] == "req-500"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


@pytest.mark.asyncio
async def test_unhandled_error_generates_request_id_when_missing():
    response = await unhandled_error_handler(make_request(), RuntimeError("boom"))
    assert response.headers["X-Request-ID"]


@pytest.mark.asyncio
async def test_internal_error_response_through_app(failing_client: AsyncClient):
    response = await failing_client.get("/api/test-failure", headers={"X-Request-ID": "req-abc"})

    assert response.status_code == 500
    body = response.json()
    assert body == {
        "error": {
            "code": "INTERNAL_ERROR",
            "message": "Internal server error",
            "request_id": "req-abc",
        }
    }
    assert "exploded" not in response.text
    assert response.headers["X-Request-ID"] == "req-abc"
    assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"
