"""JWT token utilities."""

from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from guild.config import AuthSettings


class JWTError(Exception):
    """JWT-related error."""

    pass


def create_token(
    claims: dict[str, Any], settings: AuthSettings, now: datetime | None = None
) -> str:
    """Sign claims into a session JWT valid for the configured window.

    Args:
        claims: Token claims (`iat`/`exp` are overwritten)
        settings: Authentication settings
        now: Issue time (defaults to the current UTC time)

    Returns:
        Encoded JWT token
    """
    issued_at = now or datetime.now(timezone.utc)
    expiry = issued_at + timedelta(days=settings.session_max_age_days)

    payload = {
        **claims,
        "iat": int(issued_at.timestamp()),
        "exp": int(expiry.timestamp()),
    }

    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def verify_token(token: str, settings: AuthSettings) -> dict[str, Any]:
    """Verify and decode a session JWT.

    Args:
        token: JWT token to verify
        settings: Authentication settings

    Returns:
        Decoded claims

    Raises:
        JWTError: If token is invalid or expired
    """
    try:
        return jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except jwt.ExpiredSignatureError:
        raise JWTError("Token has expired")
    except jwt.InvalidTokenError:
        raise JWTError("Invalid token")
