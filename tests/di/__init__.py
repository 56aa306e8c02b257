"""Mock providers for testing."""

from .discord import MockDiscordProvider
from .google import MockGoogleProvider
from .persistence import MockPersistenceProvider
from .container import build_test_container

__all__ = [
    "MockDiscordProvider",
    "MockGoogleProvider",
    "MockPersistenceProvider",
    "build_test_container",
]
