"""Ownership rules shared by the patient-facing record services."""

from quickhealth.core.exceptions import ForbiddenException, ValidationException
from quickhealth.core.sessions import Session
from quickhealth.services.user_service import UserService


def ensure_owner(owner_id: int, session: Session, noun: str) -> None:
    """
    Allow access to a record only for its owner or an administrator.

    Raises:
        ForbiddenException: If the caller is neither
    """
    if owner_id != session.user_id and not session.is_admin:
        raise ForbiddenException(f"Access denied to this {noun}")


async def ensure_assignable_owner(users: UserService, user_id: int, session: Session) -> None:
    """
    Check that a record may be assigned to ``user_id`` by the caller.

    Patients can only file records for themselves; administrators can file
    for anyone. The target user must exist.

    Raises:
        ForbiddenException: If a non-admin targets another user
        ValidationException: If the target user does not exist
    """
    if user_id != session.user_id and not session.is_admin:
        raise ForbiddenException("Cannot manage records for another user")

    if not await users.get_user_by_id(user_id):
        raise ValidationException("User not found")
