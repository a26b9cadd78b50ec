"""Authentication endpoints."""

from fastapi import APIRouter, Response, status

from quickhealth.config import settings
from quickhealth.core.security import sign_session_id
from quickhealth.dependencies import CurrentSession, DatabaseSession, SessionId, SessionStoreDep
from quickhealth.schemas.auth import LoginRequest, LoginResponse, MessageResponse, SignupRequest
from quickhealth.schemas.users import UserResponse
from quickhealth.services.auth_service import AuthService

router = APIRouter()


def set_session_cookie(response: Response, session_id: str) -> None:
    """Attach the signed session cookie to a response."""
    response.set_cookie(
        key=settings.session_cookie_name,
        value=sign_session_id(session_id),
        max_age=settings.session_max_age_seconds,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )


@router.post(
    "/signup",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a patient account",
)
async def signup(
    data: SignupRequest,
    db: DatabaseSession,
    store: SessionStoreDep,
) -> UserResponse:
    """
    Create a PATIENT account. The caller still has to log in afterwards.

    Args:
        data: Email, password, full name and phone
        db: Database session
        store: Session store

    Returns:
        Created user
    """
    return await AuthService(db, store).signup(data)


@router.post(
    "/login",
    response_model=LoginResponse,
    status_code=status.HTTP_200_OK,
    summary="Log in with email and password",
)
async def login(
    data: LoginRequest,
    response: Response,
    db: DatabaseSession,
    store: SessionStoreDep,
    current_session_id: SessionId,
) -> LoginResponse:
    """
    Verify credentials, open a session and set the session cookie.

    Any session the client already held is discarded first.

    Args:
        data: Email and password
        response: Response to attach the cookie to
        db: Database session
        store: Session store
        current_session_id: Session id from an existing cookie, if any

    Returns:
        The authenticated user
    """
    service = AuthService(db, store)
    session_id, user = await service.login(data)

    service.logout(current_session_id)
    set_session_cookie(response, session_id)

    return LoginResponse(user=user)


@router.post(
    "/logout",
    response_model=MessageResponse,
    status_code=status.HTTP_200_OK,
    summary="Log out and destroy the session",
)
async def logout(
    response: Response,
    db: DatabaseSession,
    store: SessionStoreDep,
    session_id: SessionId,
    current_session: CurrentSession,
) -> MessageResponse:
    """
    Destroy the server-side session and clear the cookie.

    Args:
        response: Response to clear the cookie on
        db: Database session
        store: Session store
        session_id: Session id from the cookie
        current_session: Authenticated session; logging out requires one

    Returns:
        Confirmation message
    """
    AuthService(db, store).logout(session_id)
    response.delete_cookie(
        key=settings.session_cookie_name,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
    )
    return MessageResponse(message="Logged out successfully")
