"""Contact message service."""

from datetime import UTC, datetime

import structlog
from sqlalchemy import delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from quickhealth.core.exceptions import NotFoundException, ValidationException
from quickhealth.models.contact_messages import contact_messages
from quickhealth.schemas.contact import ContactMessageCreate, ContactMessageResponse
from quickhealth.services.mappers import contact_message_to_api

logger = structlog.get_logger()


class ContactService:
    """Inbound messages from the public contact form."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def submit_message(self, data: ContactMessageCreate) -> ContactMessageResponse:
        """
        Store a message from any visitor.

        Raises:
            ValidationException: If name, email or message is missing
        """
        if not data.name or not data.email or not data.message:
            raise ValidationException("All fields are required")

        stmt = (
            insert(contact_messages)
            .values(
                name=data.name,
                email=data.email,
                message=data.message,
                created_at=datetime.now(UTC),
            )
            .returning(contact_messages)
        )
        result = await self.db.execute(stmt)
        row = result.mappings().one()
        await self.db.commit()

        logger.info("contact_message_received", message_id=row["id"])
        return contact_message_to_api(row)

    async def list_messages(self) -> list[ContactMessageResponse]:
        """All messages, newest first."""
        stmt = select(contact_messages).order_by(contact_messages.c.created_at.desc())
        result = await self.db.execute(stmt)
        return [contact_message_to_api(row) for row in result.mappings().all()]

    async def get_message(self, message_id: int) -> ContactMessageResponse:
        result = await self.db.execute(
            select(contact_messages).where(contact_messages.c.id == message_id)
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException("Message not found")
        return contact_message_to_api(row)

    async def delete_message(self, message_id: int) -> None:
        result = await self.db.execute(
            delete(contact_messages)
            .where(contact_messages.c.id == message_id)
            .returning(contact_messages.c.id)
        )
        deleted = result.first()
        await self.db.commit()

        if not deleted:
            raise NotFoundException("Message not found")
