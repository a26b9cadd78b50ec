"""Database models."""

from quickhealth.models.appointments import appointments
from quickhealth.models.contact_messages import contact_messages
from quickhealth.models.prescriptions import prescriptions
from quickhealth.models.users import metadata, users

__all__ = [
    "appointments",
    "contact_messages",
    "metadata",
    "prescriptions",
    "users",
]
