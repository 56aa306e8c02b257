"""Discord infrastructure providers."""

from dishka import Scope, provide

from guild.adapter.discord import DiscordOAuthClient, RealDiscordOAuthClient
from guild.config import Settings
from guild.util.di.base import ProviderBase


class DiscordProvider(ProviderBase):
    """Discord component base."""

    __mock_component__ = "discord"


class ProdDiscordProvider(DiscordProvider):
    """Production Discord provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_discord_oauth_client(self, settings: Settings) -> DiscordOAuthClient:
        """Provide Discord OAuth client.

        Raises:
            ConfigurationError: If Discord OAuth credentials are not configured
        """
        return RealDiscordOAuthClient(
            client_id=settings.auth.discord.client_id,
            client_secret=settings.auth.discord.client_secret,
            redirect_uri=settings.auth.discord_callback_url,
        )
