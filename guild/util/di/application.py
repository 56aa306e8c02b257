"""Application layer DI providers."""

from dishka import Scope, provide

from guild.application.usecase.auth import (
    GetSessionUseCase,
    LoginUseCase,
    SignInUseCase,
    UpdateSessionUseCase,
)
from guild.config import Settings
from guild.domain.service import (
    AuthService,
    SessionTokenService,
    TokenProjector,
    UsernameService,
    UserService,
)
from guild.util.di.base import ProviderBase


class ProdApplicationProvider(ProviderBase):
    """Production application use cases provider."""

    @provide(scope=Scope.REQUEST)
    def get_sign_in_use_case(
        self,
        user_service: UserService,
        username_service: UsernameService,
        settings: Settings,
    ) -> SignInUseCase:
        """Provide sign-in reconciliation use case."""
        return SignInUseCase(
            user_service=user_service,
            username_service=username_service,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_login_use_case(
        self,
        auth_service: AuthService,
        sign_in_use_case: SignInUseCase,
        token_projector: TokenProjector,
        session_token_service: SessionTokenService,
        settings: Settings,
    ) -> LoginUseCase:
        """Provide login use case."""
        return LoginUseCase(
            auth_service=auth_service,
            sign_in_use_case=sign_in_use_case,
            token_projector=token_projector,
            session_token_service=session_token_service,
            settings=settings,
        )

    @provide(scope=Scope.REQUEST)
    def get_get_session_use_case(
        self,
        session_token_service: SessionTokenService,
        token_projector: TokenProjector,
    ) -> GetSessionUseCase:
        """Provide get session use case."""
        return GetSessionUseCase(
            session_token_service=session_token_service,
            token_projector=token_projector,
        )

    @provide(scope=Scope.REQUEST)
    def get_update_session_use_case(
        self,
        session_token_service: SessionTokenService,
        token_projector: TokenProjector,
    ) -> UpdateSessionUseCase:
        """Provide update session use case."""
        return UpdateSessionUseCase(
            session_token_service=session_token_service,
            token_projector=token_projector,
        )
