"""Tests for appointment endpoints."""

import pytest
from httpx import AsyncClient


async def create_appointment(client: AsyncClient, data: dict) -> dict:
    response = await client.post("/api/appointments", json=data)
    assert response.status_code == 201, response.text
    return response.json()


@pytest.mark.asyncio
async def test_create_appointment(
    patient_client: AsyncClient,
    sample_appointment_data: dict,
) -> None:
    """Test creating an appointment."""
    response = await patient_client.post("/api/appointments", json=sample_appointment_data)

    assert response.status_code == 201
    data = response.json()
    assert data["doctor"] == "Dr. John Doe"
    assert data["userId"] == sample_appointment_data["userId"]
    assert data["status"] == "PENDING"
    assert data["startTime"].startswith("2025-03-10T09:00:00")
    assert data["endTime"].startswith("2025-03-10T09:30:00")
    assert "appointmentDate" not in data
    assert "id" in data


@pytest.mark.asyncio
async def test_create_with_appointment_date(
    patient_client: AsyncClient,
    sample_appointment_data: dict,
) -> None:
    """The start may arrive under its legacy name."""
    data = dict(sample_appointment_data)
    data["appointmentDate"] = data.pop("startTime")

    created = await create_appointment(patient_client, data)
    assert created["startTime"].startswith("2025-03-10T09:00:00")


@pytest.mark.asyncio
async def test_create_with_explicit_status(
    patient_client: AsyncClient,
    sample_appointment_data: dict,
) -> None:
    created = await create_appointment(
        patient_client, {**sample_appointment_data, "status": "CONFIRMED"}
    )
    assert created["status"] == "CONFIRMED"


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["userId", "doctor", "specialty", "startTime"])
async def test_create_missing_required_field(
    patient_client: AsyncClient,
    sample_appointment_data: dict,
    missing: str,
) -> None:
    data = {k: v for k, v in sample_appointment_data.items() if k != missing}

    response = await patient_client.post("/api/appointments", json=data)

    assert response.status_code == 400
    assert response.json()["message"] == "Missing required fields"


@pytest.mark.asyncio
async def test_create_with_unparseable_start(
    patient_client: AsyncClient,
    sample_appointment_data: dict,
) -> None:
    response = await patient_client.post(
        "/api/appointments",
        json={**sample_appointment_data, "startTime": "next tuesday"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_create_for_another_user_forbidden(
    patient_client: AsyncClient,
    other_patient: dict,
    sample_appointment_data: dict,
) -> None:
    response = await patient_client.post(
        "/api/appointments",
        json={**sample_appointment_data, "userId": other_patient["id"]},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_admin_creates_for_unknown_user(
    admin_client: AsyncClient,
    sample_appointment_data: dict,
) -> None:
    response = await admin_client.post(
        "/api/appointments",
        json={**sample_appointment_data, "userId": 9999},
    )

    assert response.status_code == 400
    assert response.json()["message"] == "User not found"


@pytest.mark.asyncio
async def test_list_appointments_latest_first(
    patient_client: AsyncClient,
    sample_appointment_data: dict,
) -> None:
    """Test listing appointments."""
    early = await create_appointment(patient_client, sample_appointment_data)
    late = await create_appointment(
        patient_client, {**sample_appointment_data, "startTime": "2025-06-01T09:00:00Z"}
    )

    response = await patient_client.get("/api/appointments")

    assert response.status_code == 200
    data = response.json()
    assert [item["id"] for item in data] == [late["id"], early["id"]]


@pytest.mark.asyncio
async def test_appointments_are_isolated_between_patients(
    patient_client: AsyncClient,
    other_patient_client: AsyncClient,
    sample_appointment_data: dict,
) -> None:
    created = await create_appointment(patient_client, sample_appointment_data)

    response = await other_patient_client.get("/api/appointments")
    assert response.status_code == 200
    assert response.json() == []

    response = await other_patient_client.get(f"/api/appointments/{created['id']}")
    assert response.status_code == 403

    response = await other_patient_client.put(
        f"/api/appointments/{created['id']}", json={"reason": "hijack"}
    )
    assert response.status_code == 403

    response = await other_patient_client.delete(f"/api/appointments/{created['id']}")
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_get_appointment(
    patient_client: AsyncClient,
    sample_appointment_data: dict,
) -> None:
    """Test getting a specific appointment."""
    created = await create_appointment(patient_client, sample_appointment_data)

    response = await patient_client.get(f"/api/appointments/{created['id']}")

    assert response.status_code == 200
    assert response.json()["id"] == created["id"]


@pytest.mark.asyncio
async def test_get_appointment_not_found(patient_client: AsyncClient) -> None:
    response = await patient_client.get("/api/appointments/9999")

    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"


@pytest.mark.asyncio
async def test_get_appointment_non_numeric_id(patient_client: AsyncClient) -> None:
    response = await patient_client.get("/api/appointments/abc")
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_update_appointment(
    patient_client: AsyncClient,
    sample_appointment_data: dict,
) -> None:
    """Test rescheduling via appointmentDate and changing status."""
    created = await create_appointment(patient_client, sample_appointment_data)

    response = await patient_client.put(
        f"/api/appointments/{created['id']}",
        json={"appointmentDate": "2025-04-01T15:00:00Z", "status": "CANCELLED"},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["startTime"].startswith("2025-04-01T15:00:00")
    assert data["status"] == "CANCELLED"
    assert data["doctor"] == created["doctor"]


@pytest.mark.asyncio
async def test_update_reassign_to_other_user_forbidden(
    patient_client: AsyncClient,
    other_patient: dict,
    sample_appointment_data: dict,
) -> None:
    created = await create_appointment(patient_client, sample_appointment_data)

    response = await patient_client.put(
        f"/api/appointments/{created['id']}",
        json={"userId": other_patient["id"]},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_update_appointment_not_found(patient_client: AsyncClient) -> None:
    response = await patient_client.put("/api/appointments/9999", json={"reason": "x"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_appointment(
    patient_client: AsyncClient,
    sample_appointment_data: dict,
) -> None:
    created = await create_appointment(patient_client, sample_appointment_data)

    response = await patient_client.delete(f"/api/appointments/{created['id']}")
    assert response.status_code == 204

    response = await patient_client.get(f"/api/appointments/{created['id']}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_missing_appointment_is_404(patient_client: AsyncClient) -> None:
    response = await patient_client.delete("/api/appointments/9999")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_signup_login_book_and_list(client: AsyncClient) -> None:
    """A new patient signs up, logs in, books and sees the booking."""
    response = await client.post(
        "/api/auth/signup",
        json={"email": "p@test.com", "password": "pw123456", "fullName": "P One"},
    )
    assert response.status_code == 201
    assert response.json()["roles"] == ["PATIENT"]
    user_id = response.json()["id"]

    response = await client.post(
        "/api/auth/login",
        json={"email": "p@test.com", "password": "pw123456"},
    )
    assert response.status_code == 200
    assert "connect.sid" in client.cookies

    response = await client.post(
        "/api/appointments",
        json={
            "userId": user_id,
            "doctor": "Dr. X",
            "specialty": "Cardiology",
            "startTime": "2025-12-01T10:00:00Z",
        },
    )
    assert response.status_code == 201
    created = response.json()
    assert created["status"] == "PENDING"

    response = await client.get("/api/appointments")
    assert response.status_code == 200
    listed = response.json()
    assert [item["id"] for item in listed] == [created["id"]]
    assert listed[0]["startTime"] in ("2025-12-01T10:00:00Z", "2025-12-01T10:00:00+00:00")


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
@pytest.mark.parametrize("appointment_id", ["99999999999999999999", "2147483648", "0"])
async def test_out_of_range_id_is_rejected(
    patient_client: AsyncClient,
    method: str,
    appointment_id: str,
) -> None:
    """Ids that cannot exist in an INTEGER key never reach the database."""
    response = await patient_client.request(
        method,
        f"/api/appointments/{appointment_id}",
        json={"reason": "x"} if method == "PUT" else None,
    )

    assert response.status_code == 400
    assert response.json()["error"] == "ValidationError"


@pytest.mark.asyncio
async def test_largest_integer_id_is_not_found(patient_client: AsyncClient) -> None:
    response = await patient_client.delete("/api/appointments/2147483647")
    assert response.status_code == 404
