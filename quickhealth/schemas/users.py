"""User schemas for request/response validation."""

from datetime import datetime
from typing import Any

from pydantic import field_validator

from quickhealth.schemas.base import CamelModel, blank_to_none


class UserResponse(CamelModel):
    """User as exposed over the API; roles are always an array."""

    id: int
    email: str
    full_name: str = ""
    phone: str | None = None
    roles: list[str]
    active: bool = True
    gender: str | None = None
    date_of_birth: datetime | None = None
    address: str | None = None
    avatar: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class UserSelfUpdate(CamelModel):
    """Profile update by the account owner. Role changes are not accepted here."""

    email: str | None = None
    full_name: str | None = None
    phone: str | None = None


class AdminUserCreate(CamelModel):
    """Account creation by an administrator."""

    email: str | None = None
    password: str | None = None
    full_name: str | None = None
    phone: str | None = None
    # Array or comma-joined string
    roles: Any = None


class AdminUserUpdate(CamelModel):
    """Any-field user update by an administrator."""

    email: str | None = None
    full_name: str | None = None
    phone: str | None = None
    roles: Any = None
    gender: str | None = None
    date_of_birth: datetime | None = None
    address: str | None = None
    avatar: str | None = None

    @field_validator("date_of_birth", mode="before")
    @classmethod
    def empty_date_is_absent(cls, v: Any) -> Any:
        """Ignore empty date strings."""
        return blank_to_none(v)
