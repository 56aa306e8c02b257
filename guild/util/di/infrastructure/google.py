"""Google infrastructure providers."""

from dishka import Scope, provide

from guild.adapter.google import GoogleOAuthClient, RealGoogleOAuthClient
from guild.config import Settings
from guild.util.di.base import ProviderBase


class GoogleProvider(ProviderBase):
    """Google component base."""

    __mock_component__ = "google"


class ProdGoogleProvider(GoogleProvider):
    """Production Google provider."""

    __is_mock__ = False

    @provide(scope=Scope.APP)
    def get_google_oauth_client(self, settings: Settings) -> GoogleOAuthClient:
        """Provide Google OAuth client.

        Raises:
            ConfigurationError: If Google OAuth credentials are not configured
        """
        return RealGoogleOAuthClient(
            client_id=settings.auth.google.client_id,
            client_secret=settings.auth.google.client_secret,
            redirect_uri=settings.auth.google_callback_url,
        )
