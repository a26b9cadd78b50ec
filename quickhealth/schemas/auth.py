"""Authentication schemas."""

from pydantic import BaseModel

from quickhealth.schemas.base import CamelModel
from quickhealth.schemas.users import UserResponse


class SignupRequest(CamelModel):
    """Self-service patient registration."""

    email: str | None = None
    password: str | None = None
    full_name: str | None = None
    phone: str | None = None


class LoginRequest(CamelModel):
    """Email/password login request."""

    email: str | None = None
    password: str | None = None


class LoginResponse(CamelModel):
    """Login response with the authenticated user."""

    user: UserResponse


class MessageResponse(BaseModel):
    """Plain acknowledgement."""

    message: str
