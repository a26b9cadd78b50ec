"""FastAPI dependencies."""

from collections.abc import Callable
from typing import Annotated

import structlog
from fastapi import Depends, Path, Request
from sqlalchemy.ext.asyncio import AsyncSession

from quickhealth.config import settings
from quickhealth.core.exceptions import ForbiddenException, UnauthorizedException
from quickhealth.core.roles import ADMIN, has_any_role
from quickhealth.core.security import unsign_session_cookie
from quickhealth.core.sessions import Session, SessionStore, get_session_store
from quickhealth.database import get_db

SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]

# Largest value an INTEGER primary key column can hold
MAX_RECORD_ID = 2**31 - 1


def get_session_id(request: Request) -> str | None:
    """
    Extract the session id from the signed session cookie.

    Args:
        request: Incoming request

    Returns:
        Session id, or None when the cookie is absent or its signature is invalid
    """
    cookie = request.cookies.get(settings.session_cookie_name)
    if not cookie:
        return None
    return unsign_session_cookie(cookie)


async def get_optional_session(
    store: SessionStoreDep,
    session_id: Annotated[str | None, Depends(get_session_id)],
) -> Session | None:
    """Resolve the current session without requiring one."""
    if session_id is None:
        return None
    return store.get(session_id)


async def get_current_session(
    session: Annotated[Session | None, Depends(get_optional_session)],
) -> Session:
    """
    Require an authenticated session.

    The user id is bound into the structlog context for the rest of the request.

    Raises:
        UnauthorizedException: If there is no live session carrying a user id
    """
    if session is None or not session.user_id:
        raise UnauthorizedException("Unauthorized - Please login")

    structlog.contextvars.bind_contextvars(user_id=session.user_id)
    return session


def require_roles(allowed: list[str]) -> Callable:
    """
    Build a dependency that admits sessions holding any of ``allowed``.

    Roles are checked against the snapshot taken at login.

    Args:
        allowed: Role tags that grant access

    Returns:
        Dependency yielding the session
    """

    async def dependency(
        session: Annotated[Session | None, Depends(get_optional_session)],
    ) -> Session:
        if session is None or not session.user_id:
            raise UnauthorizedException("Unauthorized")

        if not has_any_role(session.roles, allowed):
            raise ForbiddenException("Forbidden - Insufficient permissions")

        structlog.contextvars.bind_contextvars(user_id=session.user_id)
        return session

    return dependency


# Type aliases for dependency injection
DatabaseSession = Annotated[AsyncSession, Depends(get_db)]
CurrentSession = Annotated[Session, Depends(get_current_session)]
AdminSession = Annotated[Session, Depends(require_roles([ADMIN]))]
SessionId = Annotated[str | None, Depends(get_session_id)]
RecordId = Annotated[int, Path(ge=1, le=MAX_RECORD_ID, description="Record ID")]
