"""Adapter layer errors."""


class AdapterError(Exception):
    """Base adapter error."""

    pass


class OAuthProviderError(AdapterError):
    """OAuth provider rejected a request or returned an unusable response."""

    pass
