"""Conversion between stored and wire representations of user roles.

Roles are persisted as a single comma-joined string (``"PATIENT"``,
``"ADMIN"``) and exposed over the API as an array. The "admin is exclusively
admin" rule is applied only when roles are written; records that already hold
``"ADMIN,PATIENT"`` read back as both tags.
"""

from typing import Any

from quickhealth.core.exceptions import ValidationException

PATIENT = "PATIENT"
ADMIN = "ADMIN"

DEFAULT_ROLES = [PATIENT]


def to_array(stored: str | None) -> list[str]:
    """Split a stored roles string into the wire array form.

    Args:
        stored: Comma-joined roles as persisted, possibly empty or None

    Returns:
        Non-empty list of role tags; ``["PATIENT"]`` when nothing is stored
    """
    roles = [role.strip() for role in (stored or "").split(",")]
    roles = [role for role in roles if role]
    return roles or list(DEFAULT_ROLES)


def to_stored(roles: list[str]) -> str:
    """Join roles for storage, collapsing any set containing ADMIN to ``"ADMIN"``.

    Order is preserved and duplicates are kept.
    """
    if ADMIN in roles:
        return ADMIN
    return ",".join(roles)


def coerce_roles(value: Any) -> list[str]:
    """Accept roles from a request body as either an array or a comma-joined string."""
    if isinstance(value, str):
        return [role.strip() for role in value.split(",") if role.strip()]
    if isinstance(value, list) and all(isinstance(role, str) for role in value):
        return list(value)
    raise ValidationException("Roles must be an array of strings")


def has_any_role(roles: list[str], allowed: list[str]) -> bool:
    """Check whether any of ``allowed`` appears in ``roles``."""
    return any(role in roles for role in allowed)
