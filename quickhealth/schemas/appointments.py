"""Appointment schemas for request/response validation."""

from datetime import datetime
from typing import Any

from pydantic import field_validator

from quickhealth.schemas.base import CamelModel, blank_to_none


class AppointmentStatus:
    """Commonly used status values. The column itself accepts any string."""

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class AppointmentPayload(CamelModel):
    """Body accepted by appointment create and update.

    The scheduled start may be sent as ``startTime`` or under its legacy
    name ``appointmentDate``.
    """

    user_id: int | None = None
    doctor: str | None = None
    specialty: str | None = None
    start_time: datetime | None = None
    appointment_date: datetime | None = None
    end_time: datetime | None = None
    reason: str | None = None
    status: str | None = None

    @field_validator("start_time", "appointment_date", "end_time", "user_id", mode="before")
    @classmethod
    def empty_is_absent(cls, v: Any) -> Any:
        """Treat empty strings as missing."""
        return blank_to_none(v)


class AppointmentResponse(CamelModel):
    """Appointment as seen by its owner."""

    id: int
    user_id: int
    doctor: str
    specialty: str
    start_time: datetime
    end_time: datetime | None = None
    reason: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime


class AdminAppointmentResponse(AppointmentResponse):
    """Appointment enriched with the owning patient for admin views."""

    appointment_date: datetime
    patient_name: str
    patient_email: str
