"""Tests for row/payload translation."""

from datetime import UTC, datetime, timedelta, timezone

from quickhealth.schemas.appointments import AppointmentPayload
from quickhealth.schemas.prescriptions import PrescriptionPayload
from quickhealth.schemas.users import AdminUserUpdate
from quickhealth.services.mappers import (
    appointment_fields,
    appointment_start,
    appointment_to_admin_api,
    appointment_to_api,
    as_utc,
    prescription_fields,
    prescription_issued_at,
    user_fields,
    user_to_api,
)

NOW = datetime(2025, 3, 10, 9, 0, tzinfo=UTC)


def user_row(**overrides) -> dict:
    row = {
        "id": 1,
        "email": "patient@test.com",
        "password": "$2b$12$hash",
        "full_name": "Pat Patient",
        "phone": None,
        "gender": None,
        "date_of_birth": None,
        "address": None,
        "avatar": None,
        "roles": "PATIENT",
        "active": True,
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


def appointment_row(**overrides) -> dict:
    row = {
        "id": 7,
        "user_id": 1,
        "doctor": "Dr. A",
        "specialty": "Cardiology",
        "appointment_date": NOW,
        "end_time": None,
        "reason": None,
        "status": "PENDING",
        "created_at": NOW,
        "updated_at": NOW,
    }
    row.update(overrides)
    return row


def test_as_utc_treats_naive_as_utc():
    naive = datetime(2025, 1, 1, 12, 0)
    assert as_utc(naive) == datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def test_as_utc_converts_offsets():
    local = datetime(2025, 1, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
    assert as_utc(local) == datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def test_user_to_api_hides_password_and_splits_roles():
    user = user_to_api(user_row(roles="ADMIN,PATIENT"))
    data = user.model_dump(by_alias=True)

    assert "password" not in data
    assert data["roles"] == ["ADMIN", "PATIENT"]
    assert data["fullName"] == "Pat Patient"


def test_user_fields_collapses_admin_roles():
    values = user_fields(AdminUserUpdate(roles=["PATIENT", "ADMIN"], phone="555"))
    assert values == {"roles": "ADMIN", "phone": "555"}


def test_appointment_start_prefers_start_time():
    later = NOW + timedelta(days=1)
    payload = AppointmentPayload(startTime=NOW, appointmentDate=later)
    assert appointment_start(payload) == NOW


def test_appointment_start_falls_back_to_appointment_date():
    payload = AppointmentPayload(appointmentDate="2025-03-10T09:00:00Z")
    assert appointment_start(payload) == NOW


def test_appointment_start_ignores_blank_strings():
    payload = AppointmentPayload(startTime="", appointmentDate="2025-03-10T09:00:00Z")
    assert appointment_start(payload) == NOW


def test_appointment_fields_omits_absent_values():
    payload = AppointmentPayload(doctor="Dr. B", appointmentDate=NOW)
    assert appointment_fields(payload) == {"doctor": "Dr. B", "appointment_date": NOW}


def test_appointment_to_api_exposes_start_time():
    data = appointment_to_api(appointment_row()).model_dump(by_alias=True)
    assert data["startTime"] == NOW
    assert "appointmentDate" not in data


def test_appointment_to_admin_api_adds_patient_details():
    owner = {"full_name": "Pat Patient", "email": "patient@test.com"}
    data = appointment_to_admin_api(appointment_row(), owner).model_dump(by_alias=True)

    assert data["appointmentDate"] == data["startTime"] == NOW
    assert data["patientName"] == "Pat Patient"
    assert data["patientEmail"] == "patient@test.com"


def test_prescription_issued_at_falls_back_to_issued_date():
    payload = PrescriptionPayload(issuedDate="2025-03-10T09:00:00Z")
    assert prescription_issued_at(payload) == NOW


def test_prescription_fields_without_issue_time():
    payload = PrescriptionPayload(medication="Ibuprofen", dosage="200mg")
    assert prescription_fields(payload) == {"medication": "Ibuprofen", "dosage": "200mg"}
