"""Update session use case."""

from typing import Any

import logfire
from pydantic import BaseModel

from guild.domain.model import Session
from guild.domain.service import SessionTokenService, TokenProjector
from guild.domain.value import SessionTrigger


class UpdateSessionRequest(BaseModel):
    """Explicit refresh of the session token."""

    token: str  # Current session token
    data: dict[str, Any] | None = None  # Fields to merge into the token


class UpdateSessionResponse(BaseModel):
    """Refreshed token and the session built from it."""

    token: str
    session: Session


class UpdateSessionUseCase:
    """Re-reads the user snapshot into the token on an explicit trigger."""

    def __init__(
        self,
        session_token_service: SessionTokenService,
        token_projector: TokenProjector,
    ) -> None:
        """Initialize update session use case.

        Args:
            session_token_service: Session token signing service
            token_projector: Token projection domain service
        """
        self.session_token_service = session_token_service
        self.token_projector = token_projector

    async def execute(self, request: UpdateSessionRequest) -> UpdateSessionResponse:
        """Execute update session flow.

        Steps:
        1. Verify the current token
        2. Refresh projected fields from the store and merge `data`
        3. Re-sign the token and rebuild the session

        Args:
            request: Request with token and optional merge payload

        Returns:
            Re-signed token and its session

        Raises:
            JWTError: If the current token is invalid or expired
        """
        token = self.session_token_service.decode(request.token)

        refreshed = await self.token_projector.on_jwt(
            token, trigger=SessionTrigger.UPDATE, session_data=request.data
        )
        encoded = self.session_token_service.encode(refreshed)

        # Expiry comes from the freshly signed token
        signed = self.session_token_service.decode(encoded)
        session = self.token_projector.on_session(
            Session(expires=self.session_token_service.expires_at(signed)), signed
        )

        logfire.info("Session refreshed", user_id=signed.id)
        return UpdateSessionResponse(token=encoded, session=session)
