"""Authentication service for email/password login and server-side sessions."""

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from quickhealth.core.exceptions import (
    AccountDeactivatedException,
    ConflictException,
    InvalidCredentialsException,
    ValidationException,
)
from quickhealth.core.roles import PATIENT, to_array
from quickhealth.core.security import verify_password
from quickhealth.core.sessions import Session, SessionStore
from quickhealth.schemas.auth import LoginRequest, SignupRequest
from quickhealth.schemas.users import UserResponse
from quickhealth.services.mappers import user_to_api
from quickhealth.services.user_service import UserService

logger = structlog.get_logger()


class AuthService:
    """Authentication service for signup, login and logout."""

    def __init__(self, db: AsyncSession, session_store: SessionStore):
        """Initialize auth service with database session and session store."""
        self.db = db
        self.sessions = session_store
        self.users = UserService(db)

    async def signup(self, data: SignupRequest) -> UserResponse:
        """
        Register a new patient account.

        Args:
            data: Signup payload

        Returns:
            Created user; no session is established

        Raises:
            ValidationException: If email or password is missing
            ConflictException: If the email is already registered
        """
        if not data.email or not data.password:
            raise ValidationException("Email and password are required")

        if await self.users.get_user_by_email(data.email):
            raise ConflictException("User already exists")

        user = await self.users.create_user(
            email=data.email,
            password=data.password,
            full_name=data.full_name,
            phone=data.phone,
            roles=PATIENT,
        )
        logger.info("user_signed_up", user_id=user["id"])
        return user_to_api(user)

    async def login(self, data: LoginRequest) -> tuple[str, UserResponse]:
        """
        Verify credentials and open a session.

        Unknown email and wrong password produce the same error. A deactivated
        account is reported separately.

        Args:
            data: Login payload

        Returns:
            Tuple of (session id, user)

        Raises:
            ValidationException: If email or password is missing
            InvalidCredentialsException: On unknown email or wrong password
            AccountDeactivatedException: If the account is inactive
        """
        if not data.email or not data.password:
            raise ValidationException("Email and password are required")

        user = await self.users.get_user_by_email(data.email)
        if not user:
            logger.warning("login_failed", reason="unknown_email")
            raise InvalidCredentialsException()

        if not user["active"]:
            logger.warning("login_failed", reason="deactivated", user_id=user["id"])
            raise AccountDeactivatedException()

        if not verify_password(data.password, user["password"]):
            logger.warning("login_failed", reason="bad_password", user_id=user["id"])
            raise InvalidCredentialsException()

        session = Session(
            user_id=user["id"],
            email=user["email"],
            roles=to_array(user["roles"]),
        )
        session_id = self.sessions.create(session)
        logger.info("user_logged_in", user_id=user["id"], roles=session.roles)

        return session_id, user_to_api(user)

    def logout(self, session_id: str | None) -> None:
        """Destroy the server-side session if there is one."""
        if session_id:
            self.sessions.delete(session_id)
