"""Security utilities for password hashing and session cookie signing."""

import hashlib
import hmac
import secrets

from passlib.context import CryptContext

from quickhealth.config import settings

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


def generate_session_id() -> str:
    """Create a new opaque session identifier."""
    return secrets.token_urlsafe(32)


def _signature(session_id: str, secret: str) -> str:
    digest = hmac.new(secret.encode(), session_id.encode(), hashlib.sha256).hexdigest()
    return digest


def sign_session_id(session_id: str, secret: str | None = None) -> str:
    """
    Build the cookie value for a session id.

    Args:
        session_id: Server-side session identifier
        secret: Signing key, defaults to SESSION_SECRET

    Returns:
        ``<session_id>.<hex signature>``
    """
    key = secret or settings.session_secret
    return f"{session_id}.{_signature(session_id, key)}"


def unsign_session_cookie(cookie_value: str, secret: str | None = None) -> str | None:
    """
    Validate a signed cookie value and extract the session id.

    Args:
        cookie_value: Raw cookie value from the client
        secret: Signing key, defaults to SESSION_SECRET

    Returns:
        Session id or None if the value is malformed or tampered with
    """
    key = secret or settings.session_secret
    session_id, sep, signature = cookie_value.rpartition(".")
    if not sep or not session_id:
        return None

    if not hmac.compare_digest(signature, _signature(session_id, key)):
        return None

    return session_id
