"""Tests for self-service profile endpoints."""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
class TestCurrentUserProfile:
    """Tests for /api/users/me."""

    async def test_get_own_profile(self, patient_client: AsyncClient, patient: dict):
        response = await patient_client.get(
            "/api/users/me", params={"email": patient["email"]}
        )

        assert response.status_code == 200
        data = response.json()
        assert data["id"] == patient["id"]
        assert data["roles"] == ["PATIENT"]
        assert "password" not in data

    async def test_email_required(self, patient_client: AsyncClient):
        response = await patient_client.get("/api/users/me")
        assert response.status_code == 400

    async def test_cannot_read_someone_else(
        self,
        patient_client: AsyncClient,
        other_patient: dict,
    ):
        response = await patient_client.get(
            "/api/users/me", params={"email": other_patient["email"]}
        )
        assert response.status_code == 403

    async def test_update_name_and_phone(self, patient_client: AsyncClient, patient: dict):
        response = await patient_client.put(
            "/api/users/me",
            json={
                "email": patient["email"],
                "fullName": "Patricia Patient",
                "phone": "555-0199",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["fullName"] == "Patricia Patient"
        assert data["phone"] == "555-0199"

    async def test_update_ignores_roles(self, patient_client: AsyncClient, patient: dict):
        response = await patient_client.put(
            "/api/users/me",
            json={"email": patient["email"], "roles": ["ADMIN"], "fullName": "Sneaky"},
        )

        assert response.status_code == 200
        assert response.json()["roles"] == ["PATIENT"]

    async def test_update_requires_own_email(
        self,
        patient_client: AsyncClient,
        other_patient: dict,
    ):
        response = await patient_client.put(
            "/api/users/me",
            json={"email": other_patient["email"], "fullName": "Nope"},
        )
        assert response.status_code == 403

        response = await patient_client.put("/api/users/me", json={"fullName": "Nope"})
        assert response.status_code == 400

    async def test_requires_login(self, client: AsyncClient, patient: dict):
        response = await client.get("/api/users/me", params={"email": patient["email"]})
        assert response.status_code == 401
