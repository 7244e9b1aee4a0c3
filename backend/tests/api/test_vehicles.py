"""Tests for the /api/vehicles endpoints."""

import pytest
from httpx import AsyncClient


class TestListVehicles:
    @pytest.mark.asyncio
    async def test_no_params_returns_bare_list_newest_first(self, client: AsyncClient, sample_vehicles):
        response = await client.get("/api/vehicles")
        assert response.status_code == 200
        data = response.json()
        assert isinstance(data, list)
        assert len(data) == 12
        assert [v["id"] for v in data] == [v.id for v in reversed(sample_vehicles)]

    @pytest.mark.asyncio
    async def test_pagination_envelope(self, client: AsyncClient, sample_vehicles):
        page2 = (await client.get("/api/vehicles", params={"page": 2, "limit": 5})).json()
        page3 = (await client.get("/api/vehicles", params={"page": 3, "limit": 5})).json()

        assert len(page2["vehicles"]) == 5
        assert len(page3["vehicles"]) == 2
        for page in (page2, page3):
            assert page["total"] == 12
            assert page["totalPages"] == 3
            assert page["limit"] == 5

    @pytest.mark.asyncio
    async def test_filters_and_sort(self, client: AsyncClient, sample_vehicles):
        response = await client.get(
            "/api/vehicles",
            params={"fuelType": "electric", "maxPrice": 40000, "sortBy": "price", "order": "asc"},
        )
        data = response.json()
        assert data["total"] == 2
        assert [v["model"] for v in data["vehicles"]] == ["ID.3", "Model 3"]
        assert data["vehicles"][0]["fuelType"] == "electric"

    @pytest.mark.asyncio
    async def test_malformed_params_are_ignored(self, client: AsyncClient, sample_vehicles):
        response = await client.get("/api/vehicles", params={"page": "abc", "limit": "-4", "minPrice": "cheap"})
        assert response.status_code == 200
        data = response.json()
        assert data["page"] == 1
        assert data["limit"] == 1
        assert data["total"] == 12

    @pytest.mark.asyncio
    async def test_page_past_end(self, client: AsyncClient, sample_vehicles):
        data = (await client.get("/api/vehicles", params={"page": 10, "limit": 5})).json()
        assert data["vehicles"] == []
        assert data["total"] == 12
        assert data["totalPages"] == 3


class TestVehicleCrud:
    @pytest.mark.asyncio
    async def test_get_unknown_vehicle(self, client: AsyncClient):
        response = await client.get("/api/vehicles/does-not-exist")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_create_requires_token(self, client: AsyncClient):
        response = await client.post("/api/vehicles", json={"brand": "Kia", "model": "Ceed"})
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_create_and_fetch(self, user_client: AsyncClient):
        response = await user_client.post(
            "/api/vehicles",
            json={
                "brand": "Kia",
                "model": "EV6",
                "year": 2023,
                "price": 41000,
                "mileage": 1200,
                "fuelType": "Electric",
                "images": ["front.jpg"],
            },
        )
        assert response.status_code == 201
        created = response.json()
        assert created["fuelType"] == "electric"
        assert created["images"] == ["front.jpg"]
        assert created["createdAt"]

        fetched = (await user_client.get(f"/api/vehicles/{created['id']}")).json()
        assert fetched["model"] == "EV6"

    @pytest.mark.asyncio
    async def test_create_rejects_invalid_fuel_type(self, user_client: AsyncClient):
        response = await user_client.post(
            "/api/vehicles",
            json={"brand": "Kia", "model": "Ceed", "fuelType": "steam"},
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_update_keeps_id_and_created_at(self, user_client: AsyncClient, sample_vehicles):
        vehicle = sample_vehicles[0]
        before = (await user_client.get(f"/api/vehicles/{vehicle.id}")).json()

        response = await user_client.put(
            f"/api/vehicles/{vehicle.id}",
            json={"price": 14000, "id": "hijacked", "createdAt": "2000-01-01T00:00:00Z"},
        )
        assert response.status_code == 200
        after = response.json()
        assert after["price"] == 14000
        assert after["id"] == vehicle.id
        assert after["createdAt"] == before["createdAt"]
        assert after["updatedAt"] is not None

    @pytest.mark.asyncio
    async def test_delete_requires_admin(self, user_client: AsyncClient, sample_vehicles):
        response = await user_client.delete(f"/api/vehicles/{sample_vehicles[0].id}")
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    @pytest.mark.asyncio
    async def test_admin_delete(self, admin_client: AsyncClient, sample_vehicles):
        vehicle_id = sample_vehicles[0].id
        response = await admin_client.delete(f"/api/vehicles/{vehicle_id}")
        assert response.status_code == 200

        assert (await admin_client.get(f"/api/vehicles/{vehicle_id}")).status_code == 404
        assert (await admin_client.delete(f"/api/vehicles/{vehicle_id}")).status_code == 404
