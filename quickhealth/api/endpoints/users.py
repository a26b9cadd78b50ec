"""Self-service user endpoints."""

from fastapi import APIRouter, Query

from quickhealth.dependencies import CurrentSession, DatabaseSession
from quickhealth.schemas.users import UserResponse, UserSelfUpdate
from quickhealth.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/me", response_model=UserResponse)
async def get_current_user_profile(
    db: DatabaseSession,
    session: CurrentSession,
    email: str | None = Query(None, description="Email of the caller's own account"),
) -> UserResponse:
    """Get the caller's own profile."""
    return await UserService(db).get_own_profile(email, session)


@router.put("/me", response_model=UserResponse)
async def update_current_user_profile(
    data: UserSelfUpdate,
    db: DatabaseSession,
    session: CurrentSession,
) -> UserResponse:
    """Update name and phone on the caller's own profile."""
    return await UserService(db).update_own_profile(data, session)
