"""Discord OAuth 2.0 client implementation."""

from typing import Any

from guild.adapter.oauth2 import OAuth2Client
from guild.domain.service.auth_service import OAuthClient
from guild.domain.value import AuthProvider, FederatedIdentity

CDN_URL = "https://cdn.discordapp.com"


class DiscordOAuthClient(OAuthClient):
    """Base class for Discord OAuth clients.

    Provides type distinction for dependency injection.
    """

    pass


class RealDiscordOAuthClient(OAuth2Client, DiscordOAuthClient):
    """Discord OAuth 2.0 client with PKCE support."""

    provider = AuthProvider.DISCORD
    authorize_url = "https://discord.com/oauth2/authorize"
    token_url = "https://discord.com/api/oauth2/token"
    user_info_url = "https://discord.com/api/users/@me"
    scope = "identify email"

    def _to_identity(self, profile: dict[str, Any]) -> FederatedIdentity:
        return FederatedIdentity(
            provider=AuthProvider.DISCORD.value,
            provider_account_id=str(profile["id"]),
            email=profile.get("email"),
            name=profile.get("global_name") or profile.get("username"),
            image=avatar_url(profile),
        )


def avatar_url(profile: dict[str, Any]) -> str:
    """CDN URL of the user's avatar, or of the default avatar if none is set."""
    user_id = str(profile["id"])
    avatar = profile.get("avatar")

    if avatar:
        extension = "gif" if avatar.startswith("a_") else "png"
        return f"{CDN_URL}/avatars/{user_id}/{avatar}.{extension}"

    discriminator = profile.get("discriminator") or "0"
    if discriminator == "0":
        index = (int(user_id) >> 22) % 6
    else:
        index = int(discriminator) % 5
    return f"{CDN_URL}/embed/avatars/{index}.png"


class MockDiscordOAuthClient(DiscordOAuthClient):
    """Mock Discord OAuth client for testing.

    Returns deterministic identities without making real API calls.
    Identities can be registered per authorization code.
    """

    def __init__(self) -> None:
        self._identities: dict[str, FederatedIdentity] = {}

    def register(self, code: str, identity: FederatedIdentity) -> None:
        """Return `identity` when `code` is exchanged."""
        self._identities[code] = identity

    async def initiate_authorization(self, state: str) -> str:
        return f"https://discord.com/oauth2/authorize?state={state}&mock=true"

    async def complete_authorization(self, code: str, state: str) -> FederatedIdentity:
        return self._identities.get(
            code,
            FederatedIdentity(
                provider=AuthProvider.DISCORD.value,
                provider_account_id="80351110224678912",
                email="mock@discord.test",
                name="Mock Discord User",
                image=f"{CDN_URL}/embed/avatars/0.png",
            ),
        )
