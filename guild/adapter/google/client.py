"""Google OAuth 2.0 / OpenID Connect client implementation."""

from typing import Any

from guild.adapter.error import OAuthProviderError
from guild.adapter.oauth2 import OAuth2Client
from guild.domain.service.auth_service import OAuthClient
from guild.domain.value import AuthProvider, FederatedIdentity


class GoogleOAuthClient(OAuthClient):
    """Base class for Google OAuth clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealGoogleOAuthClient(OAuth2Client, GoogleOAuthClient):
    """Google OAuth 2.0 client with PKCE support."""

    provider = AuthProvider.GOOGLE
    authorize_url = "https://accounts.google.com/o/oauth2/v2/auth"
    token_url = "https://oauth2.googleapis.com/token"
    user_info_url = "https://www.googleapis.com/oauth2/v3/userinfo"
    scope = "openid email profile"

    def _to_identity(self, profile: dict[str, Any]) -> FederatedIdentity:
        # Unverified addresses could claim someone else's account
        email = profile.get("email")
        if email and profile.get("email_verified") is False:
            raise OAuthProviderError("Google account e-mail is not verified")

        return FederatedIdentity(
            provider=AuthProvider.GOOGLE.value,
            provider_account_id=str(profile["sub"]),
            email=email,
            name=profile.get("name"),
            image=profile.get("picture"),
        )


class MockGoogleOAuthClient(GoogleOAuthClient):
    """Mock Google OAuth client for testing.

    Returns deterministic identities without making real API calls.
    Identities can be registered per authorization code.
    """

    def __init__(self) -> None:
        self._identities: dict[str, FederatedIdentity] = {}

    def register(self, code: str, identity: FederatedIdentity) -> None:
        """Return `identity` when `code` is exchanged."""
        self._identities[code] = identity

    async def initiate_authorization(self, state: str) -> str:
        return f"https://accounts.google.com/o/oauth2/v2/auth?state={state}&mock=true"

    async def complete_authorization(self, code: str, state: str) -> FederatedIdentity:
        return self._identities.get(
            code,
            FederatedIdentity(
                provider=AuthProvider.GOOGLE.value,
                provider_account_id="109876543210987654321",
                email="mock@google.test",
                name="Mock Google User",
                image="https://lh3.googleusercontent.com/a/mock",
            ),
        )
