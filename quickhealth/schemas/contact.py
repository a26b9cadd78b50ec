"""Contact message schemas."""

from datetime import datetime

from quickhealth.schemas.base import CamelModel


class ContactMessageCreate(CamelModel):
    """Message submitted from the public contact form."""

    name: str | None = None
    email: str | None = None
    message: str | None = None


class ContactMessageResponse(CamelModel):
    """Stored contact message."""

    id: int
    name: str
    email: str
    message: str
    created_at: datetime
