"""Infrastructure providers."""

from .discord import DiscordProvider, ProdDiscordProvider
from .google import GoogleProvider, ProdGoogleProvider
from .oauth import OAuthAggregatorProvider
from .persistence import PersistenceProvider, ProdPersistenceProvider

__all__ = [
    "DiscordProvider",
    "GoogleProvider",
    "OAuthAggregatorProvider",
    "PersistenceProvider",
    "ProdDiscordProvider",
    "ProdGoogleProvider",
    "ProdPersistenceProvider",
]
