"""Prescription endpoints."""

from fastapi import APIRouter, status

from quickhealth.dependencies import CurrentSession, DatabaseSession, RecordId
from quickhealth.schemas.prescriptions import PrescriptionPayload, PrescriptionResponse
from quickhealth.services.prescription_service import PrescriptionService

router = APIRouter(prefix="/prescriptions", tags=["Prescriptions"])


@router.get("", response_model=list[PrescriptionResponse], summary="List own prescriptions")
async def list_prescriptions(
    session: CurrentSession,
    db: DatabaseSession,
) -> list[PrescriptionResponse]:
    """List the authenticated user's prescriptions, most recently issued first."""
    return await PrescriptionService(db).list_prescriptions(session)


@router.post(
    "",
    response_model=PrescriptionResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create prescription",
)
async def create_prescription(
    data: PrescriptionPayload,
    session: CurrentSession,
    db: DatabaseSession,
) -> PrescriptionResponse:
    """Create a prescription; ``issuedAt`` defaults to now."""
    return await PrescriptionService(db).create_prescription(data, session)


@router.get("/{prescription_id}", response_model=PrescriptionResponse)
async def get_prescription(
    prescription_id: RecordId,
    session: CurrentSession,
    db: DatabaseSession,
) -> PrescriptionResponse:
    return await PrescriptionService(db).get_prescription(prescription_id, session)


@router.put("/{prescription_id}", response_model=PrescriptionResponse)
async def update_prescription(
    prescription_id: RecordId,
    data: PrescriptionPayload,
    session: CurrentSession,
    db: DatabaseSession,
) -> PrescriptionResponse:
    return await PrescriptionService(db).update_prescription(prescription_id, data, session)


@router.delete("/{prescription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prescription(
    prescription_id: RecordId,
    session: CurrentSession,
    db: DatabaseSession,
) -> None:
    await PrescriptionService(db).delete_prescription(prescription_id, session)
