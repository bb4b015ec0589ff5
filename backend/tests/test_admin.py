"""Tests for admin clear/generate utilities."""

import random

import pytest

import patientmock.services.patients as patient_service
from patientmock.services.mock_data import build_mock_patients
from patientmock.services.patients import PatientService

V1 = "/api/v1/patients"


class TestGenerate:
    """Tests for POST /api/v1/admin/generate."""

    @pytest.mark.asyncio
    async def test_generate(self, client):
        response = await client.post("/api/v1/admin/generate", json={"count": 5})
        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "generatedCount": 5,
            "message": "Generated 5 patient(s)",
        }

        listing = (await client.get(V1)).json()
        assert listing["totalRecords"] == 5
        item = listing["items"][0]
        assert item["patientKey"].startswith("pt-")
        assert len(item["patientId"]) == 8
        assert item["primaryPayer"]["displayName"].endswith(" - PPO")

    @pytest.mark.asyncio
    async def test_default_count(self, client):
        response = await client.post("/api/v1/admin/generate", json={})
        assert response.json()["generatedCount"] == 10

    @pytest.mark.asyncio
    @pytest.mark.parametrize("count", [0, 1001, -3])
    async def test_count_out_of_range(self, client, count):
        response = await client.post("/api/v1/admin/generate", json={"count": count})
        assert response.status_code == 400
        assert response.json()["message"] == "Count must be between 1 and 1000"

    @pytest.mark.asyncio
    async def test_generated_records_are_stamped_by_generator(self, client):
        await client.post("/api/v1/admin/generate", json={"count": 1})
        key = (await client.get(V1)).json()["items"][0]["patientKey"]
        detail = (await client.get(f"/api/v1/admin/patients/{key}")).json()
        assert detail["metadata"]["createdBy"] == "admin-generator"
        assert detail["status"] == "ACTIVE"

    @pytest.mark.asyncio
    async def test_deleted_and_stored_keys_are_skipped(self, db_session, monkeypatch):
        fixed = build_mock_patients(2, "admin-generator", "now", random.Random(5))
        monkeypatch.setattr(
            patient_service,
            "build_mock_patients",
            lambda count, identity, now: [dict(values) for values in fixed],
        )
        service = PatientService(db_session)
        assert await service.generate_patients(2) == 2

        await service.delete_patient(fixed[0]["id"])
        assert await service.generate_patients(2) == 0
        assert (await service.get_patient(fixed[1]["id"])).id == fixed[1]["id"]


class TestClear:
    """Tests for DELETE /api/v1/admin/clear."""

    @pytest.mark.asyncio
    async def test_clear(self, client):
        await client.post("/api/v1/admin/generate", json={"count": 3})
        response = await client.delete("/api/v1/admin/clear")
        assert response.status_code == 200
        assert response.json() == {"success": True, "deletedCount": 3, "message": "Deleted 3 patient(s)"}
        assert (await client.get(V1)).json()["totalRecords"] == 0

    @pytest.mark.asyncio
    async def test_clear_empty(self, client):
        response = await client.delete("/api/v1/admin/clear")
        assert response.json()["deletedCount"] == 0


class TestMockData:
    """Tests for the generator itself."""

    def test_distinct_keys(self):
        patients = build_mock_patients(200, "admin-generator", "2024-01-01T00:00:00.000Z", random.Random(7))
        assert len({patient["id"] for patient in patients}) == 200

    def test_seeded_generator_is_deterministic(self):
        first = build_mock_patients(3, "x", "now", random.Random(1))
        second = build_mock_patients(3, "x", "now", random.Random(1))
        assert first == second

    def test_last_order_display_text(self):
        patient = build_mock_patients(1, "x", "now", random.Random(3))[0]
        order = patient["last_order"]
        assert order["displayText"] == f"{order['orderNumber']} - {order['status']}"
