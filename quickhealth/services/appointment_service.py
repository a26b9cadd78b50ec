"""Appointment service for business logic."""

from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from quickhealth.core.exceptions import NotFoundException, ValidationException
from quickhealth.core.sessions import Session
from quickhealth.models.appointments import appointments
from quickhealth.models.users import users
from quickhealth.schemas.appointments import (
    AdminAppointmentResponse,
    AppointmentPayload,
    AppointmentResponse,
    AppointmentStatus,
)
from quickhealth.services.access import ensure_assignable_owner, ensure_owner
from quickhealth.services.mappers import (
    appointment_fields,
    appointment_start,
    appointment_to_admin_api,
    appointment_to_api,
)
from quickhealth.services.user_service import UserService

logger = structlog.get_logger()


class AppointmentService:
    """Service for managing appointments."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db
        self.users = UserService(db)

    async def _get_row(self, appointment_id: int) -> dict[str, Any]:
        result = await self.db.execute(
            select(appointments).where(appointments.c.id == appointment_id)
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Appointment not found")
        return dict(row)

    async def _update_row(self, appointment_id: int, values: dict[str, Any]) -> dict[str, Any]:
        values = {**values, "updated_at": datetime.now(UTC)}
        stmt = (
            update(appointments)
            .where(appointments.c.id == appointment_id)
            .values(**values)
            .returning(appointments)
        )
        result = await self.db.execute(stmt)
        row = result.mappings().first()
        await self.db.commit()

        if not row:
            raise NotFoundException("Appointment not found")
        return dict(row)

    async def _delete_row(self, appointment_id: int) -> None:
        result = await self.db.execute(
            delete(appointments)
            .where(appointments.c.id == appointment_id)
            .returning(appointments.c.id)
        )
        deleted = result.first()
        await self.db.commit()

        if not deleted:
            raise NotFoundException("Appointment not found")

    # Patient-facing

    async def list_appointments(self, session: Session) -> list[AppointmentResponse]:
        """
        List the caller's own appointments, latest start first.

        Args:
            session: Authenticated session

        Returns:
            Appointments owned by the session user
        """
        stmt = (
            select(appointments)
            .where(appointments.c.user_id == session.user_id)
            .order_by(appointments.c.appointment_date.desc())
        )
        result = await self.db.execute(stmt)
        return [appointment_to_api(row) for row in result.mappings().all()]

    async def get_appointment(self, appointment_id: int, session: Session) -> AppointmentResponse:
        """
        Get appointment by ID.

        Raises:
            NotFoundException: If appointment not found
            ForbiddenException: If the caller does not own it and is not an admin
        """
        row = await self._get_row(appointment_id)
        ensure_owner(row["user_id"], session, "appointment")
        return appointment_to_api(row)

    async def create_appointment(
        self,
        data: AppointmentPayload,
        session: Session,
    ) -> AppointmentResponse:
        """
        Create a new appointment.

        Args:
            data: Appointment payload; start may be ``startTime`` or ``appointmentDate``
            session: Authenticated session

        Returns:
            Created appointment, status PENDING unless given

        Raises:
            ValidationException: If userId, doctor, specialty or start is missing,
                or the user does not exist
            ForbiddenException: If a patient books for another user
        """
        start = appointment_start(data)
        if not data.user_id or not data.doctor or not data.specialty or not start:
            raise ValidationException("Missing required fields")

        await ensure_assignable_owner(self.users, data.user_id, session)

        values = appointment_fields(data)
        values.setdefault("status", AppointmentStatus.PENDING)
        now = datetime.now(UTC)
        values["created_at"] = now
        values["updated_at"] = now

        stmt = insert(appointments).values(**values).returning(appointments)
        result = await self.db.execute(stmt)
        row = result.mappings().one()
        await self.db.commit()

        logger.info(
            "appointment_created",
            appointment_id=row["id"],
            user_id=row["user_id"],
            created_by=session.user_id,
        )
        return appointment_to_api(row)

    async def update_appointment(
        self,
        appointment_id: int,
        data: AppointmentPayload,
        session: Session,
    ) -> AppointmentResponse:
        """
        Update an existing appointment.

        Raises:
            NotFoundException: If appointment not found
            ForbiddenException: If the caller does not own it, or a patient
                reassigns it to another user
            ValidationException: If the new owner does not exist
        """
        current = await self._get_row(appointment_id)
        ensure_owner(current["user_id"], session, "appointment")

        values = appointment_fields(data)
        if "user_id" in values:
            await ensure_assignable_owner(self.users, values["user_id"], session)

        if not values:
            return appointment_to_api(current)

        row = await self._update_row(appointment_id, values)
        logger.info("appointment_updated", appointment_id=appointment_id, fields=sorted(values))
        return appointment_to_api(row)

    async def delete_appointment(self, appointment_id: int, session: Session) -> None:
        """
        Permanently delete an appointment.

        Raises:
            NotFoundException: If appointment not found
            ForbiddenException: If the caller does not own it
        """
        current = await self._get_row(appointment_id)
        ensure_owner(current["user_id"], session, "appointment")

        await self._delete_row(appointment_id)
        logger.info("appointment_deleted", appointment_id=appointment_id)

    # Administration

    def _enriched_query(self):
        return select(
            appointments,
            users.c.id.label("owner_id"),
            users.c.full_name.label("patient_name"),
            users.c.email.label("patient_email"),
        ).select_from(appointments.outerjoin(users, appointments.c.user_id == users.c.id))

    @staticmethod
    def _to_admin(row: Any) -> AdminAppointmentResponse:
        if row["owner_id"] is None:
            raise RuntimeError(
                f"Appointment {row['id']} references missing user {row['user_id']}"
            )
        owner = {"full_name": row["patient_name"], "email": row["patient_email"]}
        return appointment_to_admin_api(row, owner)

    async def list_all_appointments(self) -> list[AdminAppointmentResponse]:
        """All appointments across users, latest start first, with patient details."""
        stmt = self._enriched_query().order_by(appointments.c.appointment_date.desc())
        result = await self.db.execute(stmt)
        return [self._to_admin(row) for row in result.mappings().all()]

    async def admin_get_appointment(self, appointment_id: int) -> AdminAppointmentResponse:
        """Single appointment with patient details."""
        stmt = self._enriched_query().where(appointments.c.id == appointment_id)
        result = await self.db.execute(stmt)
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Appointment not found")
        return self._to_admin(row)

    async def admin_update_appointment(
        self,
        appointment_id: int,
        data: AppointmentPayload,
    ) -> AdminAppointmentResponse:
        """
        Update any field of an appointment, including its owner.

        Raises:
            NotFoundException: If the appointment or the new owner does not exist
        """
        values = appointment_fields(data)
        if "user_id" in values and not await self.users.get_user_by_id(values["user_id"]):
            raise NotFoundException("User not found")

        if values:
            await self._update_row(appointment_id, values)
            logger.info("appointment_updated_by_admin", appointment_id=appointment_id)

        return await self.admin_get_appointment(appointment_id)

    async def admin_delete_appointment(self, appointment_id: int) -> None:
        """Permanently delete any appointment."""
        await self._delete_row(appointment_id)
        logger.info("appointment_deleted_by_admin", appointment_id=appointment_id)
