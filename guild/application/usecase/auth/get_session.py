"""Get session use case."""

from pydantic import BaseModel

from guild.domain.model import Session
from guild.domain.service import SessionTokenService, TokenProjector


class GetSessionRequest(BaseModel):
    """Get session request."""

    token: str | None  # Session token from cookie


class GetSessionUseCase:
    """Builds the client-visible session from the session token alone."""

    def __init__(
        self,
        session_token_service: SessionTokenService,
        token_projector: TokenProjector,
    ) -> None:
        """Initialize get session use case.

        Args:
            session_token_service: Session token signing service
            token_projector: Token projection domain service
        """
        self.session_token_service = session_token_service
        self.token_projector = token_projector

    async def execute(self, request: GetSessionRequest) -> Session | None:
        """Execute get session flow.

        Never reads the user store: everything comes from the token.

        Args:
            request: Request with the session token

        Returns:
            Session, or None if the token is missing, invalid or expired
        """
        token = self.session_token_service.decode_optional(request.token)
        if token is None:
            return None

        session = Session(expires=self.session_token_service.expires_at(token))
        return self.token_projector.on_session(session, token)
