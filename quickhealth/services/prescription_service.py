"""Prescription service for business logic."""

from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from quickhealth.core.exceptions import NotFoundException, ValidationException
from quickhealth.core.sessions import Session
from quickhealth.models.prescriptions import prescriptions
from quickhealth.models.users import users
from quickhealth.schemas.prescriptions import (
    AdminPrescriptionResponse,
    PrescriptionPayload,
    PrescriptionResponse,
)
from quickhealth.services.access import ensure_assignable_owner, ensure_owner
from quickhealth.services.mappers import (
    prescription_fields,
    prescription_to_admin_api,
    prescription_to_api,
)
from quickhealth.services.user_service import UserService

logger = structlog.get_logger()

DEFAULT_STATUS = "Active"


class PrescriptionService:
    """Service for managing prescriptions."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db
        self.users = UserService(db)

    async def _get_row(self, prescription_id: int) -> dict[str, Any]:
        result = await self.db.execute(
            select(prescriptions).where(prescriptions.c.id == prescription_id)
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Prescription not found")
        return dict(row)

    async def _update_row(self, prescription_id: int, values: dict[str, Any]) -> dict[str, Any]:
        values = {**values, "updated_at": datetime.now(UTC)}
        stmt = (
            update(prescriptions)
            .where(prescriptions.c.id == prescription_id)
            .values(**values)
            .returning(prescriptions)
        )
        result = await self.db.execute(stmt)
        row = result.mappings().first()
        await self.db.commit()

        if not row:
            raise NotFoundException("Prescription not found")
        return dict(row)

    async def _delete_row(self, prescription_id: int) -> None:
        result = await self.db.execute(
            delete(prescriptions)
            .where(prescriptions.c.id == prescription_id)
            .returning(prescriptions.c.id)
        )
        deleted = result.first()
        await self.db.commit()

        if not deleted:
            raise NotFoundException("Prescription not found")

    async def list_prescriptions(self, session: Session) -> list[PrescriptionResponse]:
        """List the caller's own prescriptions, most recently issued first."""
        stmt = (
            select(prescriptions)
            .where(prescriptions.c.user_id == session.user_id)
            .order_by(prescriptions.c.issued_at.desc())
        )
        result = await self.db.execute(stmt)
        return [prescription_to_api(row) for row in result.mappings().all()]

    async def get_prescription(
        self,
        prescription_id: int,
        session: Session,
    ) -> PrescriptionResponse:
        row = await self._get_row(prescription_id)
        ensure_owner(row["user_id"], session, "prescription")
        return prescription_to_api(row)

    async def create_prescription(
        self,
        data: PrescriptionPayload,
        session: Session,
    ) -> PrescriptionResponse:
        """
        Create a prescription.

        ``issuedAt`` (or ``issuedDate``) defaults to now when absent;
        ``expiresAt`` stays unset unless given.

        Raises:
            ValidationException: If userId, medication or dosage is missing,
                or the user does not exist
            ForbiddenException: If a patient files for another user
        """
        if not data.user_id or not data.medication or not data.dosage:
            raise ValidationException("Missing required fields")

        await ensure_assignable_owner(self.users, data.user_id, session)

        now = datetime.now(UTC)
        values = prescription_fields(data)
        values.setdefault("issued_at", now)
        values.setdefault("status", DEFAULT_STATUS)
        values["created_at"] = now
        values["updated_at"] = now

        stmt = insert(prescriptions).values(**values).returning(prescriptions)
        result = await self.db.execute(stmt)
        row = result.mappings().one()
        await self.db.commit()

        logger.info(
            "prescription_created",
            prescription_id=row["id"],
            user_id=row["user_id"],
            created_by=session.user_id,
        )
        return prescription_to_api(row)

    async def update_prescription(
        self,
        prescription_id: int,
        data: PrescriptionPayload,
        session: Session,
    ) -> PrescriptionResponse:
        current = await self._get_row(prescription_id)
        ensure_owner(current["user_id"], session, "prescription")

        values = prescription_fields(data)
        if "user_id" in values:
            await ensure_assignable_owner(self.users, values["user_id"], session)

        if not values:
            return prescription_to_api(current)

        row = await self._update_row(prescription_id, values)
        logger.info("prescription_updated", prescription_id=prescription_id)
        return prescription_to_api(row)

    async def delete_prescription(self, prescription_id: int, session: Session) -> None:
        current = await self._get_row(prescription_id)
        ensure_owner(current["user_id"], session, "prescription")

        await self._delete_row(prescription_id)
        logger.info("prescription_deleted", prescription_id=prescription_id)

    # Administration

    def _enriched_query(self):
        return select(
            prescriptions,
            users.c.id.label("owner_id"),
            users.c.full_name.label("patient_name"),
            users.c.email.label("patient_email"),
        ).select_from(prescriptions.outerjoin(users, prescriptions.c.user_id == users.c.id))

    @staticmethod
    def _to_admin(row: Any) -> AdminPrescriptionResponse:
        if row["owner_id"] is None:
            raise RuntimeError(
                f"Prescription {row['id']} references missing user {row['user_id']}"
            )
        owner = {"full_name": row["patient_name"], "email": row["patient_email"]}
        return prescription_to_admin_api(row, owner)

    async def list_all_prescriptions(self) -> list[AdminPrescriptionResponse]:
        """All prescriptions, most recently issued first, with patient details."""
        stmt = self._enriched_query().order_by(prescriptions.c.issued_at.desc())
        result = await self.db.execute(stmt)
        return [self._to_admin(row) for row in result.mappings().all()]

    async def admin_get_prescription(self, prescription_id: int) -> AdminPrescriptionResponse:
        stmt = self._enriched_query().where(prescriptions.c.id == prescription_id)
        result = await self.db.execute(stmt)
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Prescription not found")
        return self._to_admin(row)

    async def admin_update_prescription(
        self,
        prescription_id: int,
        data: PrescriptionPayload,
    ) -> AdminPrescriptionResponse:
        """
        Update any field of a prescription, including its owner.

        Raises:
            NotFoundException: If the prescription or the new owner does not exist
        """
        values = prescription_fields(data)
        if "user_id" in values and not await self.users.get_user_by_id(values["user_id"]):
            raise NotFoundException("User not found")

        if values:
            await self._update_row(prescription_id, values)
            logger.info("prescription_updated_by_admin", prescription_id=prescription_id)

        return await self.admin_get_prescription(prescription_id)

    async def admin_delete_prescription(self, prescription_id: int) -> None:
        await self._delete_row(prescription_id)
        logger.info("prescription_deleted_by_admin", prescription_id=prescription_id)
