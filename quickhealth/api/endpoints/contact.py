"""Public contact form endpoint."""

from fastapi import APIRouter, status

from quickhealth.dependencies import DatabaseSession
from quickhealth.schemas.contact import ContactMessageCreate, ContactMessageResponse
from quickhealth.services.contact_service import ContactService

router = APIRouter(prefix="/contact", tags=["Contact"])


@router.post(
    "",
    response_model=ContactMessageResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Submit a contact message",
)
async def submit_contact(
    data: ContactMessageCreate,
    db: DatabaseSession,
) -> ContactMessageResponse:
    """Store a message from the public contact form. No login required."""
    return await ContactService(db).submit_message(data)
