"""OAuth 2.0 authorization code client shared by the Discord and Google adapters.

Implements the Authorization Code Flow with PKCE. Subclasses supply the
provider endpoints and map the provider profile onto a FederatedIdentity.
"""

import time
from typing import Any
from urllib.parse import urlencode

import httpx
import logfire

from guild.adapter.error import OAuthProviderError
from guild.adapter.pkce import generate_pkce_pair
from guild.domain.service.auth_service import OAuthClient
from guild.domain.value import AuthProvider, FederatedIdentity
from guild.util.error import ConfigurationError

# Verifiers of flows not completed within this window are dropped
PKCE_VERIFIER_TTL_SECONDS = 10 * 60


class OAuth2Client(OAuthClient):
    """Authorization code + PKCE client for a single provider."""

    provider: AuthProvider
    authorize_url: str
    token_url: str
    user_info_url: str
    scope: str

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize OAuth client.

        Args:
            client_id: OAuth client ID
            client_secret: OAuth client secret
            redirect_uri: Callback URL registered with the provider
            transport: Optional httpx transport (tests use httpx.MockTransport)

        Raises:
            ConfigurationError: If the client ID or secret is missing
        """
        if not client_id:
            raise ConfigurationError(f"{self.provider.value} OAuth client ID must be configured")
        if not client_secret:
            raise ConfigurationError(
                f"{self.provider.value} OAuth client secret must be configured"
            )

        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._transport = transport

        # PKCE verifiers and creation times per state (in-memory, single process)
        self._pkce_verifiers: dict[str, tuple[str, float]] = {}
        self._clock = time.monotonic

    async def initiate_authorization(self, state: str) -> str:
        """Build the provider authorization URL.

        Args:
            state: State parameter for CSRF protection

        Returns:
            Authorization URL to redirect user to
        """
        self._evict_expired_verifiers()

        code_verifier, code_challenge = generate_pkce_pair()
        self._pkce_verifiers[state] = (code_verifier, self._clock())

        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": self.scope,
            "state": state,
            "code_challenge": code_challenge,
            "code_challenge_method": "S256",
        }

        logfire.info(
            "OAuth authorization initiated",
            provider=self.provider.value,
            redirect_uri=self.redirect_uri,
        )

        return f"{self.authorize_url}?{urlencode(params)}"

    async def complete_authorization(self, code: str, state: str) -> FederatedIdentity:
        """Exchange the code and read the provider profile.

        Args:
            code: Authorization code from the callback
            state: State parameter for verification

        Returns:
            Identity asserted by the provider

        Raises:
            OAuthProviderError: If state is unknown or the provider fails
        """
        entry = self._pkce_verifiers.pop(state, None)
        if not entry or self._clock() - entry[1] > PKCE_VERIFIER_TTL_SECONDS:
            raise OAuthProviderError("Invalid state or PKCE verifier not found")
        code_verifier = entry[0]

        access_token = await self._exchange_code_for_token(code, code_verifier)
        profile = await self._get_user_info(access_token)
        identity = self._to_identity(profile)

        logfire.info(
            "OAuth profile fetched",
            provider=self.provider.value,
            provider_account_id=identity.provider_account_id,
            has_email=bool(identity.email),
        )
        return identity

    def _evict_expired_verifiers(self) -> None:
        cutoff = self._clock() - PKCE_VERIFIER_TTL_SECONDS
        expired = [s for s, (_, created) in self._pkce_verifiers.items() if created < cutoff]
        for state in expired:
            del self._pkce_verifiers[state]

    def _to_identity(self, profile: dict[str, Any]) -> FederatedIdentity:
        raise NotImplementedError

    async def _exchange_code_for_token(self, code: str, code_verifier: str) -> str:
        """Exchange authorization code for access token.

        Raises:
            OAuthProviderError: If token exchange fails
        """
        data = {
            "code": code,
            "grant_type": "authorization_code",
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "code_verifier": code_verifier,
        }

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    self.token_url,
                    data=data,
                    headers={"Accept": "application/json"},
                    timeout=30.0,
                )
        except httpx.HTTPError as e:
            logfire.error(
                "OAuth token exchange HTTP error",
                provider=self.provider.value,
                error=str(e),
            )
            raise OAuthProviderError(f"HTTP error during token exchange: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "OAuth token exchange failed",
                provider=self.provider.value,
                status_code=response.status_code,
                error=response.text,
            )
            raise OAuthProviderError(f"Token exchange failed: {response.status_code}")

        access_token = response.json().get("access_token")
        if not access_token:
            raise OAuthProviderError("Token response carried no access token")
        return access_token

    async def _get_user_info(self, access_token: str) -> dict[str, Any]:
        """Fetch the signed-in user's profile.

        Raises:
            OAuthProviderError: If the request fails
        """
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.get(
                    self.user_info_url,
                    headers={"Authorization": f"Bearer {access_token}"},
                    timeout=30.0,
                )
        except httpx.HTTPError as e:
            logfire.error(
                "OAuth user info HTTP error", provider=self.provider.value, error=str(e)
            )
            raise OAuthProviderError(f"HTTP error fetching user info: {e}") from e

        if response.status_code != 200:
            logfire.error(
                "OAuth user info request failed",
                provider=self.provider.value,
                status_code=response.status_code,
                error=response.text,
            )
            raise OAuthProviderError(f"User info request failed: {response.status_code}")

        return response.json()
