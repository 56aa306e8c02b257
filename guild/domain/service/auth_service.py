"""Authentication domain service."""

from guild.domain.value import AuthProvider, FederatedIdentity

from .base import Service


class OAuthClient:
    """Generic OAuth client interface for all providers."""

    async def initiate_authorization(self, state: str) -> str:
        """Initiate OAuth authorization flow.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        raise NotImplementedError

    async def complete_authorization(self, code: str, state: str) -> FederatedIdentity:
        """Complete OAuth authorization flow.

        Args:
            code: Authorization code from OAuth callback
            state: State parameter for verification

        Returns:
            Identity asserted by the provider
        """
        raise NotImplementedError


class AuthService(Service):
    """Domain service coordinating the Discord and Google OAuth clients."""

    def __init__(self, oauth_clients: dict[AuthProvider, OAuthClient]) -> None:
        """Initialize auth service.

        Args:
            oauth_clients: Map of provider to OAuth client implementation
        """
        self.oauth_clients = oauth_clients

    def _client(self, provider: AuthProvider) -> OAuthClient:
        client = self.oauth_clients.get(provider)
        if not client:
            raise ValueError(f"Unsupported provider: {provider}")
        return client

    async def initiate_login(self, provider: AuthProvider, state: str) -> str:
        """Initiate OAuth login flow for any provider.

        Args:
            provider: Authentication provider to use
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to

        Raises:
            ValueError: If provider not supported
        """
        return await self._client(provider).initiate_authorization(state)

    async def complete_login(
        self, provider: AuthProvider, code: str, state: str
    ) -> FederatedIdentity:
        """Complete OAuth login flow for any provider.

        Args:
            provider: Authentication provider used
            code: Authorization code from OAuth callback
            state: State parameter for verification

        Returns:
            Identity asserted by the provider

        Raises:
            ValueError: If provider not supported
        """
        return await self._client(provider).complete_authorization(code, state)
