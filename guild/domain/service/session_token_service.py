"""Session token domain service."""

from datetime import datetime, timezone

import logfire
from pydantic import ValidationError

from guild.config import AuthSettings
from guild.domain.model import SessionToken
from guild.util.jwt import JWTError, create_token, verify_token

from .base import Service


class SessionTokenService(Service):
    """Signs and verifies session tokens."""

    def __init__(self, auth_settings: AuthSettings) -> None:
        """Initialize session token service.

        Args:
            auth_settings: Authentication settings
        """
        self.auth_settings = auth_settings

    def encode(self, token: SessionToken) -> str:
        """Sign a token, restarting its validity window.

        Args:
            token: Token claims

        Returns:
            Encoded JWT string
        """
        with logfire.span("session_token_service.encode", user_id=token.id):
            encoded = create_token(token.to_claims(), self.auth_settings)
            logfire.info("Session token issued", user_id=token.id)
            return encoded

    def decode(self, encoded: str) -> SessionToken:
        """Verify an encoded token and return its claims.

        Args:
            encoded: JWT string

        Returns:
            Decoded token

        Raises:
            JWTError: If token is invalid or expired
        """
        with logfire.span("session_token_service.decode"):
            try:
                claims = verify_token(encoded, self.auth_settings)
                return SessionToken.from_claims(claims)
            except JWTError as e:
                logfire.info("Session token rejected", error=str(e))
                raise
            except ValidationError as e:
                logfire.warn("Session token claims malformed", error=str(e))
                raise JWTError("Malformed token claims") from e

    def decode_optional(self, encoded: str | None) -> SessionToken | None:
        """Decode a token, treating a missing or invalid one as no session.

        Args:
            encoded: JWT string (optional)

        Returns:
            Decoded token, or None if missing or invalid
        """
        if not encoded:
            return None

        try:
            return self.decode(encoded)
        except JWTError as e:
            logfire.debug("Treating request as unauthenticated", error=str(e))
            return None

    @staticmethod
    def expires_at(token: SessionToken) -> datetime | None:
        if token.exp is None:
            return None
        return datetime.fromtimestamp(token.exp, tz=timezone.utc)
