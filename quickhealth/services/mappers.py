"""Translation between stored rows and API payloads.

Every function here is a pure transform: stored row -> response model, or
request payload -> column values. Column names differ from the wire names in
a few places (``appointment_date`` is ``startTime``, ``roles`` is a
comma-joined string stored but an array on the wire).
"""

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any

from quickhealth.core.roles import coerce_roles, to_array, to_stored
from quickhealth.schemas.appointments import (
    AdminAppointmentResponse,
    AppointmentPayload,
    AppointmentResponse,
)
from quickhealth.schemas.contact import ContactMessageResponse
from quickhealth.schemas.prescriptions import (
    AdminPrescriptionResponse,
    PrescriptionPayload,
    PrescriptionResponse,
)
from quickhealth.schemas.users import AdminUserCreate, AdminUserUpdate, UserResponse

Row = Mapping[str, Any]


def as_utc(value: datetime | None) -> datetime | None:
    """Normalize a timestamp to UTC; naive values are taken to already be UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _present(values: dict[str, Any]) -> dict[str, Any]:
    return {key: value for key, value in values.items() if value is not None}


# Users


def user_to_api(row: Row) -> UserResponse:
    """Build the outward user payload. The password hash is never included."""
    return UserResponse(
        id=row["id"],
        email=row["email"],
        full_name=row["full_name"] or "",
        phone=row["phone"],
        roles=to_array(row["roles"]),
        active=bool(row["active"]),
        gender=row["gender"],
        date_of_birth=as_utc(row["date_of_birth"]),
        address=row["address"],
        avatar=row["avatar"],
        created_at=as_utc(row["created_at"]),
        updated_at=as_utc(row["updated_at"]),
    )


def stored_roles(value: Any) -> str:
    """Canonical stored form for roles arriving in a request body."""
    return to_stored(coerce_roles(value))


def user_fields(payload: AdminUserCreate | AdminUserUpdate) -> dict[str, Any]:
    """Column values for an admin create or update; absent fields are omitted."""
    data = payload.model_dump(exclude_unset=True, exclude={"password"})
    values = _present(data)

    if "roles" in values:
        values["roles"] = stored_roles(values["roles"])
    if "date_of_birth" in values:
        values["date_of_birth"] = as_utc(values["date_of_birth"])

    return values


# Appointments


def appointment_start(payload: AppointmentPayload) -> datetime | None:
    """Scheduled start from ``startTime``, falling back to ``appointmentDate``."""
    return as_utc(payload.start_time or payload.appointment_date)


def appointment_fields(payload: AppointmentPayload) -> dict[str, Any]:
    """Column values carried by an appointment payload; absent fields are omitted."""
    return _present(
        {
            "user_id": payload.user_id,
            "doctor": payload.doctor,
            "specialty": payload.specialty,
            "appointment_date": appointment_start(payload),
            "end_time": as_utc(payload.end_time),
            "reason": payload.reason,
            "status": payload.status,
        }
    )


def appointment_to_api(row: Row) -> AppointmentResponse:
    """Owner-facing appointment, with the stored start exposed as ``startTime``."""
    return AppointmentResponse(
        id=row["id"],
        user_id=row["user_id"],
        doctor=row["doctor"],
        specialty=row["specialty"],
        start_time=as_utc(row["appointment_date"]),
        end_time=as_utc(row["end_time"]),
        reason=row["reason"],
        status=row["status"],
        created_at=as_utc(row["created_at"]),
        updated_at=as_utc(row["updated_at"]),
    )


def appointment_to_admin_api(row: Row, owner: Row) -> AdminAppointmentResponse:
    """Admin-facing appointment carrying both start names and the patient's identity."""
    base = appointment_to_api(row)
    return AdminAppointmentResponse(
        **base.model_dump(),
        appointment_date=base.start_time,
        patient_name=owner["full_name"] or "",
        patient_email=owner["email"],
    )


# Prescriptions


def prescription_issued_at(payload: PrescriptionPayload) -> datetime | None:
    """Issue time from ``issuedAt``, falling back to ``issuedDate``."""
    return as_utc(payload.issued_at or payload.issued_date)


def prescription_fields(payload: PrescriptionPayload) -> dict[str, Any]:
    """Column values carried by a prescription payload; absent fields are omitted."""
    return _present(
        {
            "user_id": payload.user_id,
            "medication": payload.medication,
            "dosage": payload.dosage,
            "instructions": payload.instructions,
            "issued_at": prescription_issued_at(payload),
            "expires_at": as_utc(payload.expires_at),
            "status": payload.status,
        }
    )


def prescription_to_api(row: Row) -> PrescriptionResponse:
    """Owner-facing prescription."""
    return PrescriptionResponse(
        id=row["id"],
        user_id=row["user_id"],
        medication=row["medication"],
        dosage=row["dosage"],
        instructions=row["instructions"],
        issued_at=as_utc(row["issued_at"]),
        expires_at=as_utc(row["expires_at"]),
        status=row["status"],
        created_at=as_utc(row["created_at"]),
        updated_at=as_utc(row["updated_at"]),
    )


def prescription_to_admin_api(row: Row, owner: Row) -> AdminPrescriptionResponse:
    """Admin-facing prescription with the patient's name and email."""
    base = prescription_to_api(row)
    return AdminPrescriptionResponse(
        **base.model_dump(),
        patient_name=owner["full_name"] or "",
        patient_email=owner["email"],
    )


# Contact messages


def contact_message_to_api(row: Row) -> ContactMessageResponse:
    return ContactMessageResponse(
        id=row["id"],
        name=row["name"],
        email=row["email"],
        message=row["message"],
        created_at=as_utc(row["created_at"]),
    )
