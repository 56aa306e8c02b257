"""Domain layer DI providers."""

from dishka import Scope, provide

from guild.config import AuthSettings
from guild.domain.repository import UserRepository
from guild.domain.service import (
    AuthService,
    OAuthClient,
    SessionTokenService,
    TokenProjector,
    UsernameService,
    UserService,
)
from guild.domain.value import AuthProvider
from guild.util.di.base import ProviderBase


class ProdDomainProvider(ProviderBase):
    """Production domain services provider.

    Services touching the store are REQUEST-scoped so they share the
    request's database session.
    """

    scope = Scope.REQUEST

    @provide
    def get_auth_service(
        self, oauth_clients: dict[AuthProvider, OAuthClient]
    ) -> AuthService:
        """Provide multi-provider authentication domain service."""
        return AuthService(oauth_clients=oauth_clients)

    @provide(scope=Scope.APP)
    def get_session_token_service(
        self, auth_settings: AuthSettings
    ) -> SessionTokenService:
        """Provide session token codec."""
        return SessionTokenService(auth_settings=auth_settings)

    @provide
    def get_user_service(self, user_repository: UserRepository) -> UserService:
        """Provide user domain service."""
        return UserService(user_repository=user_repository)

    @provide
    def get_username_service(
        self, user_repository: UserRepository, auth_settings: AuthSettings
    ) -> UsernameService:
        """Provide username generation service."""
        return UsernameService(
            user_repository=user_repository,
            max_attempts=auth_settings.username_max_attempts,
        )

    @provide
    def get_token_projector(self, user_service: UserService) -> TokenProjector:
        """Provide session token projector."""
        return TokenProjector(user_service=user_service)
