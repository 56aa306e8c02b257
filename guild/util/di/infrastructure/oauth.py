"""OAuth client aggregation."""

from dishka import Scope, provide

from guild.adapter.discord import DiscordOAuthClient
from guild.adapter.google import GoogleOAuthClient
from guild.domain.service.auth_service import OAuthClient
from guild.domain.value import AuthProvider
from guild.util.di.base import ProviderBase


class OAuthAggregatorProvider(ProviderBase):
    """Collects every provider client into one mapping for AuthService."""

    scope = Scope.APP

    @provide(scope=Scope.APP)
    def get_oauth_clients(
        self,
        discord_oauth_client: DiscordOAuthClient,
        google_oauth_client: GoogleOAuthClient,
    ) -> dict[AuthProvider, OAuthClient]:
        """Provide OAuth clients keyed by provider."""
        return {
            AuthProvider.DISCORD: discord_oauth_client,
            AuthProvider.GOOGLE: google_oauth_client,
        }
