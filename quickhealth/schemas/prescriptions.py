"""Prescription schemas for request/response validation."""

from datetime import datetime
from typing import Any

from pydantic import field_validator

from quickhealth.schemas.base import CamelModel, blank_to_none


class PrescriptionPayload(CamelModel):
    """Body accepted by prescription create and update.

    ``issuedDate`` is accepted as an alternative name for ``issuedAt``.
    """

    user_id: int | None = None
    medication: str | None = None
    dosage: str | None = None
    instructions: str | None = None
    issued_at: datetime | None = None
    issued_date: datetime | None = None
    expires_at: datetime | None = None
    status: str | None = None

    @field_validator("issued_at", "issued_date", "expires_at", "user_id", mode="before")
    @classmethod
    def empty_is_absent(cls, v: Any) -> Any:
        """Treat empty strings as missing."""
        return blank_to_none(v)


class PrescriptionResponse(CamelModel):
    """Prescription as seen by its owner."""

    id: int
    user_id: int
    medication: str
    dosage: str
    instructions: str | None = None
    issued_at: datetime
    expires_at: datetime | None = None
    status: str
    created_at: datetime
    updated_at: datetime


class AdminPrescriptionResponse(PrescriptionResponse):
    """Prescription enriched with the owning patient for admin views."""

    patient_name: str
    patient_email: str
