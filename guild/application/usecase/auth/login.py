"""Login use case."""

import logfire
from pydantic import BaseModel

from guild.application.usecase.auth.sign_in import SignInRequest, SignInUseCase
from guild.config import Settings
from guild.domain.error import SignInRefusedError
from guild.domain.model import SessionToken
from guild.domain.service import AuthService, SessionTokenService, TokenProjector
from guild.domain.value import AuthProvider, ProviderAccount, SessionTrigger


class LoginRequest(BaseModel):
    """Login request from OAuth callback."""

    provider: AuthProvider
    code: str  # OAuth authorization code
    state: str  # State parameter for session verification
    callback_url: str | None = None  # Where the flow asked to land


class LoginResponse(BaseModel):
    """Login response."""

    token: str
    user_id: str | None
    is_new_user: bool
    redirect_url: str


class LoginUseCase:
    """Use case for completing a Discord or Google sign-in."""

    def __init__(
        self,
        auth_service: AuthService,
        sign_in_use_case: SignInUseCase,
        token_projector: TokenProjector,
        session_token_service: SessionTokenService,
        settings: Settings,
    ) -> None:
        """Initialize login use case.

        Args:
            auth_service: Authentication domain service (handles all providers)
            sign_in_use_case: Identity reconciliation use case
            token_projector: Token projection domain service
            session_token_service: Session token signing service
            settings: Application settings
        """
        self.auth_service = auth_service
        self.sign_in_use_case = sign_in_use_case
        self.token_projector = token_projector
        self.session_token_service = session_token_service
        self.settings = settings

    async def execute(self, request: LoginRequest) -> LoginResponse:
        """Execute login flow.

        Steps:
        1. Complete OAuth with the provider and get the identity
        2. Reconcile the identity with the user store
        3. Project the user snapshot into a new session token
        4. Sign the token and pick the redirect target

        Args:
            request: Login request with OAuth callback parameters

        Returns:
            Login response with signed session token

        Raises:
            SignInRefusedError: If reconciliation refused the identity
        """
        identity = await self.auth_service.complete_login(
            request.provider, request.code, request.state
        )

        logfire.info(
            "OAuth completed",
            provider=identity.provider,
            provider_account_id=identity.provider_account_id,
            email=identity.email,
        )

        result = await self.sign_in_use_case.execute(SignInRequest(identity=identity))
        if not result.allowed:
            raise SignInRefusedError(identity.provider, identity.email)

        account = ProviderAccount(
            provider=identity.provider,
            provider_account_id=identity.provider_account_id,
        )
        token = await self.token_projector.on_jwt(
            SessionToken(),
            identity=result.identity,
            account=account,
            trigger=SessionTrigger.SIGN_UP if result.is_new_user else SessionTrigger.SIGN_IN,
        )

        base_url = self.settings.api.base_url
        redirect_url = self.token_projector.redirect(
            request.callback_url or base_url, base_url
        )

        return LoginResponse(
            token=self.session_token_service.encode(token),
            user_id=token.id,
            is_new_user=result.is_new_user,
            redirect_url=redirect_url,
        )
