"""Domain value objects for Guild."""

from guild.domain.value.identifiers import UserId
from guild.domain.value.types import (
    RECONCILED_PROVIDERS,
    AuthProvider,
    FederatedIdentity,
    ProviderAccount,
    Rank,
    Role,
    SessionTrigger,
    Username,
)

__all__ = [
    # Identifiers
    "UserId",
    # Types
    "AuthProvider",
    "FederatedIdentity",
    "ProviderAccount",
    "RECONCILED_PROVIDERS",
    "Rank",
    "Role",
    "SessionTrigger",
    "Username",
]
