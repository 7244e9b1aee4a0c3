"""Tests for the /api/inquiries endpoints."""

import pytest
import pytest_asyncio
from httpx import AsyncClient


def inquiry_payload(vehicle_id: str, **overrides) -> dict:
    payload = {
        "vehicleId": vehicle_id,
        "name": "Jane Buyer",
        "email": "Jane@Example.com",
        "phone": "+1 555 0100",
        "message": "Is this car still available for a test drive?",
    }
    payload.update(overrides)
    return payload


@pytest_asyncio.fixture
async def inquiry(client: AsyncClient, sample_vehicles) -> dict:
    response = await client.post("/api/inquiries", json=inquiry_payload(sample_vehicles[0].id))
    assert response.status_code == 201
    return response.json()


class TestCreateInquiry:
    @pytest.mark.asyncio
    async def test_public_create(self, inquiry: dict):
        assert inquiry["status"] == "new"
        assert inquiry["email"] == "jane@example.com"
        assert inquiry["vehicleId"]

    @pytest.mark.asyncio
    async def test_unknown_vehicle(self, client: AsyncClient):
        response = await client.post("/api/inquiries", json=inquiry_payload("missing"))
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Vehicle not found"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "overrides",
        [
            {"email": "not-an-email"},
            {"message": "too short"},
            {"name": "   "},
            {"vehicleId": ""},
        ],
    )
    async def test_invalid_fields(self, client: AsyncClient, sample_vehicles, overrides):
        response = await client.post(
            "/api/inquiries",
            json=inquiry_payload(sample_vehicles[0].id, **overrides),
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestManageInquiries:
    @pytest.mark.asyncio
    async def test_listing_requires_admin(self, user_client: AsyncClient, inquiry: dict):
        response = await user_client.get("/api/inquiries")
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_admin_list_includes_vehicle(self, admin_client: AsyncClient, inquiry: dict):
        response = await admin_client.get("/api/inquiries")
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 1
        assert data["limit"] == 50
        assert data["totalPages"] == 1
        assert data["inquiries"][0]["brand"] == "Toyota"
        assert data["inquiries"][0]["model"] == "Corolla"

    @pytest.mark.asyncio
    async def test_list_with_unknown_status_filter(self, admin_client: AsyncClient, inquiry: dict):
        response = await admin_client.get("/api/inquiries", params={"status": "bogus"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_bogus_status_update_is_rejected(self, admin_client: AsyncClient, inquiry: dict):
        response = await admin_client.put(f"/api/inquiries/{inquiry['id']}", json={"status": "bogus"})
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_admin_marks_contacted(self, admin_client: AsyncClient, inquiry: dict):
        response = await admin_client.put(f"/api/inquiries/{inquiry['id']}", json={"status": "contacted"})
        assert response.status_code == 200
        assert response.json()["status"] == "contacted"

        filtered = (await admin_client.get("/api/inquiries", params={"status": "contacted"})).json()
        assert filtered["total"] == 1

    @pytest.mark.asyncio
    async def test_update_unknown_inquiry(self, admin_client: AsyncClient):
        response = await admin_client.put("/api/inquiries/missing", json={"status": "closed"})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_stats(self, admin_client: AsyncClient, inquiry: dict):
        await admin_client.put(f"/api/inquiries/{inquiry['id']}", json={"status": "closed"})
        response = await admin_client.get("/api/inquiries/stats")
        assert response.json() == {"new": 0, "contacted": 0, "closed": 1}

    @pytest.mark.asyncio
    async def test_get_and_delete(self, admin_client: AsyncClient, inquiry: dict):
        assert (await admin_client.get(f"/api/inquiries/{inquiry['id']}")).status_code == 200
        assert (await admin_client.delete(f"/api/inquiries/{inquiry['id']}")).status_code == 200
        assert (await admin_client.get(f"/api/inquiries/{inquiry['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_inquiries_for_vehicle(self, admin_client: AsyncClient, sample_vehicles, inquiry: dict):
        response = await admin_client.get(f"/api/vehicles/{sample_vehicles[0].id}/inquiries")
        assert response.status_code == 200
        assert [i["id"] for i in response.json()] == [inquiry["id"]]

        other = await admin_client.get(f"/api/vehicles/{sample_vehicles[1].id}/inquiries")
        assert other.json() == []
