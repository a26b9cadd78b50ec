"""Admin-only endpoints for system management."""

from typing import Any

from fastapi import APIRouter, Body, status

from quickhealth.dependencies import AdminSession, DatabaseSession, RecordId
from quickhealth.schemas.appointments import AdminAppointmentResponse, AppointmentPayload
from quickhealth.schemas.contact import ContactMessageResponse
from quickhealth.schemas.prescriptions import AdminPrescriptionResponse, PrescriptionPayload
from quickhealth.schemas.users import AdminUserCreate, AdminUserUpdate, UserResponse
from quickhealth.services.appointment_service import AppointmentService
from quickhealth.services.contact_service import ContactService
from quickhealth.services.prescription_service import PrescriptionService
from quickhealth.services.user_service import UserService

router = APIRouter(prefix="/admin", tags=["Admin"])


# Users


@router.get(
    "/users",
    response_model=list[UserResponse],
    summary="List all users (admin only)",
)
async def list_all_users(
    db: DatabaseSession,
    admin: AdminSession,
) -> list[UserResponse]:
    """
    Get every user account, newest first.

    Requires admin role.

    Args:
        db: Database session
        admin: Authenticated admin session

    Returns:
        All users with roles as arrays
    """
    return await UserService(db).list_users()


@router.post(
    "/users",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create user (admin only)",
)
async def create_user(
    data: AdminUserCreate,
    db: DatabaseSession,
    admin: AdminSession,
) -> UserResponse:
    """Create an account; roles default to PATIENT."""
    return await UserService(db).admin_create_user(data)


@router.get("/users/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: RecordId,
    db: DatabaseSession,
    admin: AdminSession,
) -> UserResponse:
    return await UserService(db).get_user(user_id)


@router.put(
    "/users/{user_id}",
    response_model=UserResponse,
    summary="Update user (admin only)",
)
async def update_user(
    user_id: RecordId,
    data: AdminUserUpdate,
    db: DatabaseSession,
    admin: AdminSession,
) -> UserResponse:
    """
    Update any profile field of a user.

    Args:
        user_id: Target user
        data: Fields to change; roles may be an array or comma-joined string
        db: Database session
        admin: Authenticated admin session

    Returns:
        Updated user
    """
    return await UserService(db).admin_update_user(user_id, data)


@router.patch(
    "/users/{user_id}/roles",
    response_model=UserResponse,
    summary="Assign roles (admin only)",
)
async def assign_roles(
    user_id: RecordId,
    db: DatabaseSession,
    admin: AdminSession,
    roles: Any = Body(..., description="JSON array of role tags"),
) -> UserResponse:
    """
    Replace a user's roles.

    A set containing ADMIN is stored as ADMIN alone.
    """
    return await UserService(db).set_roles(user_id, roles)


@router.patch("/users/{user_id}/activate", response_model=UserResponse)
async def activate_user(
    user_id: RecordId,
    db: DatabaseSession,
    admin: AdminSession,
) -> UserResponse:
    return await UserService(db).set_active(user_id, True)


@router.patch("/users/{user_id}/deactivate", response_model=UserResponse)
async def deactivate_user(
    user_id: RecordId,
    db: DatabaseSession,
    admin: AdminSession,
) -> UserResponse:
    """Deactivate an account; existing sessions stay valid until they expire."""
    return await UserService(db).set_active(user_id, False)


@router.delete("/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: RecordId,
    db: DatabaseSession,
    admin: AdminSession,
) -> None:
    """Delete a user together with their appointments and prescriptions."""
    await UserService(db).delete_user(user_id)


# Appointments


@router.get(
    "/appointments",
    response_model=list[AdminAppointmentResponse],
    summary="List all appointments (admin only)",
)
async def list_all_appointments(
    db: DatabaseSession,
    admin: AdminSession,
) -> list[AdminAppointmentResponse]:
    """
    Get every appointment across all users, latest start first.

    Each entry carries the patient's name and email.
    """
    return await AppointmentService(db).list_all_appointments()


@router.get("/appointments/{appointment_id}", response_model=AdminAppointmentResponse)
async def get_appointment(
    appointment_id: RecordId,
    db: DatabaseSession,
    admin: AdminSession,
) -> AdminAppointmentResponse:
    return await AppointmentService(db).admin_get_appointment(appointment_id)


@router.put("/appointments/{appointment_id}", response_model=AdminAppointmentResponse)
async def update_appointment(
    appointment_id: RecordId,
    data: AppointmentPayload,
    db: DatabaseSession,
    admin: AdminSession,
) -> AdminAppointmentResponse:
    """Update any appointment, including reassigning it to another user."""
    return await AppointmentService(db).admin_update_appointment(appointment_id, data)


@router.delete("/appointments/{appointment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_appointment(
    appointment_id: RecordId,
    db: DatabaseSession,
    admin: AdminSession,
) -> None:
    await AppointmentService(db).admin_delete_appointment(appointment_id)


# Prescriptions


@router.get(
    "/prescriptions",
    response_model=list[AdminPrescriptionResponse],
    summary="List all prescriptions (admin only)",
)
async def list_all_prescriptions(
    db: DatabaseSession,
    admin: AdminSession,
) -> list[AdminPrescriptionResponse]:
    """Get every prescription, most recently issued first, with patient details."""
    return await PrescriptionService(db).list_all_prescriptions()


@router.get("/prescriptions/{prescription_id}", response_model=AdminPrescriptionResponse)
async def get_prescription(
    prescription_id: RecordId,
    db: DatabaseSession,
    admin: AdminSession,
) -> AdminPrescriptionResponse:
    return await PrescriptionService(db).admin_get_prescription(prescription_id)


@router.put("/prescriptions/{prescription_id}", response_model=AdminPrescriptionResponse)
async def update_prescription(
    prescription_id: RecordId,
    data: PrescriptionPayload,
    db: DatabaseSession,
    admin: AdminSession,
) -> AdminPrescriptionResponse:
    return await PrescriptionService(db).admin_update_prescription(prescription_id, data)


@router.delete("/prescriptions/{prescription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_prescription(
    prescription_id: RecordId,
    db: DatabaseSession,
    admin: AdminSession,
) -> None:
    await PrescriptionService(db).admin_delete_prescription(prescription_id)


# Contact messages


@router.get(
    "/contact-messages",
    response_model=list[ContactMessageResponse],
    summary="List contact messages (admin only)",
)
async def list_contact_messages(
    db: DatabaseSession,
    admin: AdminSession,
) -> list[ContactMessageResponse]:
    """Get all contact form submissions, newest first."""
    return await ContactService(db).list_messages()


@router.get("/contact-messages/{message_id}", response_model=ContactMessageResponse)
async def get_contact_message(
    message_id: RecordId,
    db: DatabaseSession,
    admin: AdminSession,
) -> ContactMessageResponse:
    return await ContactService(db).get_message(message_id)


@router.delete("/contact-messages/{message_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_contact_message(
    message_id: RecordId,
    db: DatabaseSession,
    admin: AdminSession,
) -> None:
    await ContactService(db).delete_message(message_id)
