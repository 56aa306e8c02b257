"""Dependency injection module."""

from typing import Type

from guild.util.di.application import ProdApplicationProvider
from guild.util.di.base import Component, ProviderBase
from guild.util.di.core import ProdConfigProvider
from guild.util.di.domain import ProdDomainProvider
from guild.util.di.infrastructure import (
    DiscordProvider,
    GoogleProvider,
    OAuthAggregatorProvider,
    PersistenceProvider,
    ProdDiscordProvider,
    ProdGoogleProvider,
    ProdPersistenceProvider,
)

PROVIDERS: list[Type[ProviderBase]] = [
    # Core providers (not mockable)
    ProdConfigProvider,
    ProdDomainProvider,
    ProdApplicationProvider,
    # Infrastructure components (mockable)
    DiscordProvider,
    GoogleProvider,
    PersistenceProvider,
    OAuthAggregatorProvider,
]


def get_provider(
    base: Type[ProviderBase], use_mock: bool = False
) -> Type[ProviderBase]:
    """Pick the provider class to instantiate for a base.

    A base without subclasses is concrete and used directly. A base with
    subclasses is a mockable component; the subclass whose `__is_mock__`
    matches `use_mock` is returned.

    Args:
        base: Provider base class
        use_mock: Whether to use mock implementation

    Returns:
        Provider class (not instantiated)

    Raises:
        ValueError: If requested implementation not found
    """
    subclasses = base.__subclasses__()
    if not subclasses:
        return base

    impl = next(
        (c for c in subclasses if getattr(c, "__is_mock__", False) == use_mock),
        None,
    )
    if not impl:
        kind = "mock" if use_mock else "production"
        component_name = getattr(base, "__mock_component__", base.__name__)
        raise ValueError(f"No {kind} implementation for {component_name}")

    return impl


__all__ = [
    "Component",
    "ProviderBase",
    "PROVIDERS",
    "get_provider",
    "ProdConfigProvider",
    "ProdDomainProvider",
    "ProdApplicationProvider",
    "DiscordProvider",
    "GoogleProvider",
    "OAuthAggregatorProvider",
    "PersistenceProvider",
    "ProdDiscordProvider",
    "ProdGoogleProvider",
    "ProdPersistenceProvider",
]
