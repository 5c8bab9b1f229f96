"""Password hashing and JWT creation/verification for authentication."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from app.core.config import PASSWORD_MAX_BYTES, settings


def hash_password(plain_password: str, rounds: int | None = None) -> str:
    """
    Hash a plain-text password with a fresh random salt. Do not store plain passwords.
    Raises ValueError for input longer than bcrypt's 72-byte limit.
    """
    raw = plain_password.encode("utf-8")
    if len(raw) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(raw, salt).decode("utf-8")


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash using bcrypt's own comparison."""
    try:
        raw = plain_password.encode("utf-8")
        # Over-long input could never have been hashed; bcrypt would compare only a prefix.
        if len(raw) > PASSWORD_MAX_BYTES:
            return False
        return bcrypt.checkpw(raw, hashed.encode("utf-8"))
    except (ValueError, TypeError, AttributeError):
        return False


def create_access_token(sub: str) -> str:
    """
    Create a JWT access token with sub (username), exp and iat.
    Roles are not embedded; they are re-read from the store on every request.
    """
    now = datetime.now(UTC)
    expire = now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
    payload: dict[str, Any] = {
        "sub": sub,
        "exp": expire,
        "iat": now,
    }
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.encode(
        payload,
        secret,
        algorithm=settings.JWT_ALGORITHM,
    )


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and validate JWT; return payload (sub, exp, iat).
    Raises jwt.PyJWTError on invalid or expired token.
    """
    secret = settings.JWT_SECRET.get_secret_value()
    return jwt.decode(
        token,
        secret,
        algorithms=[settings.JWT_ALGORITHM],
    )
