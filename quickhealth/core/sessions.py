"""Server-side session storage.

A session is created at login and referenced by a signed cookie. It holds a
snapshot of the user's id, email and roles taken at login time; role changes
made afterwards are only seen after the user logs in again.
"""

import time
from collections.abc import Callable
from datetime import UTC, datetime

import redis
import structlog
from pydantic import BaseModel, Field

from quickhealth.config import settings
from quickhealth.core.redis_client import get_redis_client
from quickhealth.core.roles import ADMIN, has_any_role
from quickhealth.core.security import generate_session_id

logger = structlog.get_logger()


class Session(BaseModel):
    """Authenticated identity bound to a session cookie."""

    user_id: int
    email: str
    roles: list[str] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @property
    def is_admin(self) -> bool:
        """Whether the login-time role snapshot includes ADMIN."""
        return has_any_role(self.roles, [ADMIN])


class SessionStore:
    """Interface for session persistence backends."""

    def __init__(self, ttl: int):
        """Initialize store with session time-to-live in seconds."""
        self.ttl = ttl

    def create(self, session: Session) -> str:
        """Persist a session and return its new id."""
        raise NotImplementedError

    def get(self, session_id: str) -> Session | None:
        """Load a live session, or None if unknown or expired."""
        raise NotImplementedError

    def delete(self, session_id: str) -> None:
        """Destroy a session. Unknown ids are ignored."""
        raise NotImplementedError

    def ping(self) -> bool:
        """Report whether the backend is reachable."""
        return True


class InMemorySessionStore(SessionStore):
    """Process-local store for tests and single-worker development."""

    def __init__(self, ttl: int, clock: Callable[[], float] = time.monotonic):
        """Initialize with TTL and an injectable monotonic clock."""
        super().__init__(ttl)
        self._clock = clock
        self._sessions: dict[str, tuple[Session, float]] = {}

    def create(self, session: Session) -> str:
        session_id = generate_session_id()
        self._sessions[session_id] = (session, self._clock() + self.ttl)
        return session_id

    def get(self, session_id: str) -> Session | None:
        entry = self._sessions.get(session_id)
        if entry is None:
            return None

        session, expires_at = entry
        if self._clock() >= expires_at:
            del self._sessions[session_id]
            return None

        return session

    def delete(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def __len__(self) -> int:
        return len(self._sessions)


class RedisSessionStore(SessionStore):
    """Redis-backed store; entries expire through Redis key TTLs."""

    KEY_PREFIX = "session:"

    def __init__(self, redis_client: redis.Redis, ttl: int):
        """Initialize store with Redis client."""
        super().__init__(ttl)
        self.redis = redis_client

    def _key(self, session_id: str) -> str:
        return f"{self.KEY_PREFIX}{session_id}"

    def create(self, session: Session) -> str:
        session_id = generate_session_id()
        self.redis.setex(self._key(session_id), self.ttl, session.model_dump_json())
        return session_id

    def get(self, session_id: str) -> Session | None:
        raw = self.redis.get(self._key(session_id))
        if raw is None:
            return None
        return Session.model_validate_json(raw)

    def delete(self, session_id: str) -> None:
        self.redis.delete(self._key(session_id))

    def ping(self) -> bool:
        try:
            return bool(self.redis.ping())
        except redis.RedisError as e:
            logger.warning("session_store_unreachable", error=str(e))
            return False


_session_store: SessionStore | None = None


def get_session_store() -> SessionStore:
    """
    Get or create the configured session store.

    Returns:
        Store selected by SESSION_BACKEND
    """
    global _session_store

    if _session_store is None:
        if settings.session_backend == "memory":
            _session_store = InMemorySessionStore(ttl=settings.session_max_age_seconds)
        elif settings.session_backend == "redis":
            _session_store = RedisSessionStore(
                get_redis_client(), ttl=settings.session_max_age_seconds
            )
        else:
            raise ValueError(f"Unknown session backend: {settings.session_backend}")

    return _session_store
