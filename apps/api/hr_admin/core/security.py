"""Security utilities for session tokens and password verification."""

from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from hr_admin.core.config import settings


# =============================================================================
# Session Token (JWT in cookie)
# =============================================================================

def create_session_token(user_id: int) -> str:
    """
    Create signed session JWT.

    Always signs with current secret (JWT_SECRET). The token carries only
    the user identity; the active company is resolved per request.
    """
    payload = {
        "sub": str(user_id),
        "iat": datetime.now(timezone.utc),
        "exp": datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRES_HOURS),
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm="HS256")


def decode_session_token(token: str) -> dict:
    """
    Decode and verify session JWT.

    Tries current secret first, then previous (for rotation support).

    Raises:
        jwt.InvalidTokenError: If token invalid with all secrets
    """
    last_error = None
    for secret in settings.jwt_secrets:
        try:
            return jwt.decode(token, secret, algorithms=["HS256"])
        except jwt.InvalidTokenError as e:
            last_error = e
            continue
    raise last_error  # type: ignore


# =============================================================================
# Passwords
# =============================================================================

def hash_password(plain: str, rounds: int | None = None) -> str:
    salt = bcrypt.gensalt(rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(plain.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain: str, hashed: str | None) -> bool:
    """Constant-time bcrypt check; malformed hashes verify as False."""
    if not plain or not hashed:
        return False
    try:
        return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
