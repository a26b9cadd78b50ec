"""Appointment endpoints."""

from fastapi import APIRouter, status

from quickhealth.dependencies import CurrentSession, DatabaseSession, RecordId
from quickhealth.schemas.appointments import AppointmentPayload, AppointmentResponse
from quickhealth.services.appointment_service import AppointmentService

router = APIRouter(prefix="/appointments", tags=["Appointments"])


@router.get(
    "",
    response_model=list[AppointmentResponse],
    status_code=status.HTTP_200_OK,
    summary="List own appointments",
)
async def list_appointments(
    session: CurrentSession,
    db: DatabaseSession,
) -> list[AppointmentResponse]:
    """
    List the authenticated user's appointments, latest first.

    Args:
        session: Authenticated session
        db: Database session

    Returns:
        Appointments owned by the caller
    """
    return await AppointmentService(db).list_appointments(session)


@router.post(
    "",
    response_model=AppointmentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Book an appointment",
)
async def create_appointment(
    data: AppointmentPayload,
    session: CurrentSession,
    db: DatabaseSession,
) -> AppointmentResponse:
    """
    Create an appointment.

    The start may be sent as ``startTime`` or ``appointmentDate``.

    Args:
        data: Appointment creation data
        session: Authenticated session
        db: Database session

    Returns:
        Created appointment
    """
    return await AppointmentService(db).create_appointment(data, session)


@router.get(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Get appointment by ID",
)
async def get_appointment(
    appointment_id: RecordId,
    session: CurrentSession,
    db: DatabaseSession,
) -> AppointmentResponse:
    """Get one of the caller's appointments."""
    return await AppointmentService(db).get_appointment(appointment_id, session)


@router.put(
    "/{appointment_id}",
    response_model=AppointmentResponse,
    status_code=status.HTTP_200_OK,
    summary="Update or reschedule appointment",
)
async def update_appointment(
    appointment_id: RecordId,
    data: AppointmentPayload,
    session: CurrentSession,
    db: DatabaseSession,
) -> AppointmentResponse:
    """
    Update an existing appointment.

    Args:
        appointment_id: Appointment ID
        data: Fields to change
        session: Authenticated session
        db: Database session

    Returns:
        Updated appointment
    """
    return await AppointmentService(db).update_appointment(appointment_id, data, session)


@router.delete(
    "/{appointment_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete appointment",
)
async def delete_appointment(
    appointment_id: RecordId,
    session: CurrentSession,
    db: DatabaseSession,
) -> None:
    """Permanently delete an appointment."""
    await AppointmentService(db).delete_appointment(appointment_id, session)
