"""User service for business logic."""

from datetime import UTC, datetime
from typing import Any

import structlog
from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from quickhealth.core.exceptions import (
    ConflictException,
    ForbiddenException,
    NotFoundException,
    ValidationException,
)
from quickhealth.core.roles import PATIENT
from quickhealth.core.security import get_password_hash
from quickhealth.core.sessions import Session
from quickhealth.models.users import users
from quickhealth.schemas.users import (
    AdminUserCreate,
    AdminUserUpdate,
    UserResponse,
    UserSelfUpdate,
)
from quickhealth.services.mappers import stored_roles, user_fields, user_to_api

logger = structlog.get_logger()


class UserService:
    """Service for user operations."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def get_user_by_id(self, user_id: int) -> dict | None:
        """Get user row by ID."""
        result = await self.db.execute(select(users).where(users.c.id == user_id))
        user = result.mappings().first()
        return dict(user) if user else None

    async def get_user_by_email(self, email: str) -> dict | None:
        """Get user row by exact email match."""
        result = await self.db.execute(select(users).where(users.c.email == email))
        user = result.mappings().first()
        return dict(user) if user else None

    async def create_user(
        self,
        email: str,
        password: str,
        full_name: str | None = None,
        phone: str | None = None,
        roles: str = PATIENT,
    ) -> dict:
        """
        Insert a user with a freshly hashed password.

        Raises:
            ConflictException: If the email is already registered
        """
        now = datetime.now(UTC)
        query = (
            users.insert()
            .values(
                email=email,
                password=get_password_hash(password),
                full_name=full_name or "",
                phone=phone or None,
                roles=roles,
                active=True,
                created_at=now,
                updated_at=now,
            )
            .returning(users)
        )

        try:
            result = await self.db.execute(query)
            user = result.mappings().one()
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("User already exists")

        logger.info("user_created", user_id=user["id"])
        return dict(user)

    async def _update(self, user_id: int, values: dict[str, Any]) -> dict:
        values = {**values, "updated_at": datetime.now(UTC)}
        query = update(users).where(users.c.id == user_id).values(**values).returning(users)

        try:
            result = await self.db.execute(query)
            user = result.mappings().first()
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise ConflictException("User already exists")

        if not user:
            raise NotFoundException("User not found")

        return dict(user)

    # Self-service

    async def get_own_profile(self, email: str | None, session: Session) -> UserResponse:
        """
        Look up the caller's own record by email.

        Raises:
            ValidationException: If email is missing
            NotFoundException: If no user has that email
            ForbiddenException: If the email belongs to another account
        """
        if not email:
            raise ValidationException("Email is required")

        user = await self.get_user_by_email(email)
        if not user:
            raise NotFoundException("User not found")

        if user["id"] != session.user_id:
            raise ForbiddenException("Access denied to this profile")

        return user_to_api(user)

    async def update_own_profile(self, data: UserSelfUpdate, session: Session) -> UserResponse:
        """Update name and phone on the caller's own record."""
        await self.get_own_profile(data.email, session)

        values = data.model_dump(
            exclude_unset=True,
            exclude_none=True,
            include={"full_name", "phone"},
        )
        user = await self._update(session.user_id, values)
        return user_to_api(user)

    # Administration

    async def list_users(self) -> list[UserResponse]:
        """All users, newest first."""
        result = await self.db.execute(select(users).order_by(users.c.created_at.desc()))
        return [user_to_api(row) for row in result.mappings().all()]

    async def get_user(self, user_id: int) -> UserResponse:
        user = await self.get_user_by_id(user_id)
        if not user:
            raise NotFoundException("User not found")
        return user_to_api(user)

    async def admin_create_user(self, data: AdminUserCreate) -> UserResponse:
        """Create an account on behalf of someone; role defaults to PATIENT."""
        if not data.email or not data.password:
            raise ValidationException("Email and password are required")

        values = user_fields(data)
        user = await self.create_user(
            email=data.email,
            password=data.password,
            full_name=data.full_name,
            phone=data.phone,
            roles=values.get("roles") or PATIENT,
        )
        logger.info("user_created_by_admin", user_id=user["id"], roles=user["roles"])
        return user_to_api(user)

    async def admin_update_user(self, user_id: int, data: AdminUserUpdate) -> UserResponse:
        """Update any profile field; roles are canonicalized before storage."""
        values = user_fields(data)
        if not values:
            return await self.get_user(user_id)

        user = await self._update(user_id, values)
        return user_to_api(user)

    async def set_roles(self, user_id: int, roles: Any) -> UserResponse:
        """
        Replace a user's roles.

        Args:
            user_id: Target user
            roles: Request body; must be a JSON array of role tags

        Raises:
            ValidationException: If roles is not an array
            NotFoundException: If the user does not exist
        """
        if not isinstance(roles, list):
            raise ValidationException("Roles must be an array")

        stored = stored_roles(roles)
        user = await self._update(user_id, {"roles": stored})
        logger.info("user_roles_assigned", user_id=user_id, roles=stored)
        return user_to_api(user)

    async def set_active(self, user_id: int, active: bool) -> UserResponse:
        """Activate or deactivate an account."""
        user = await self._update(user_id, {"active": active})
        logger.info("user_activation_changed", user_id=user_id, active=active)
        return user_to_api(user)

    async def delete_user(self, user_id: int) -> None:
        """Hard delete a user; owned appointments and prescriptions cascade."""
        result = await self.db.execute(
            delete(users).where(users.c.id == user_id).returning(users.c.id)
        )
        deleted = result.first()
        await self.db.commit()

        if not deleted:
            raise NotFoundException("User not found")

        logger.info("user_deleted", user_id=user_id)
