"""Domain value objects for Guild.

Value objects are immutable and defined by their values, not identity.
"""

import re
from enum import Enum

from pydantic import field_validator

from guild.domain.value.common import RootValueObject, ValueObject
from guild.domain.value.identifiers import UserId


class AuthProvider(str, Enum):
    """OAuth providers whose sign-ins are reconciled against the user store."""

    DISCORD = "discord"
    GOOGLE = "google"


# Sign-ins from any other provider pass through without touching the store
RECONCILED_PROVIDERS: frozenset[str] = frozenset(p.value for p in AuthProvider)


class Rank(str, Enum):
    """Gamification tier."""

    RECRUIT = "recruit"
    ELITE = "elite"


class Role(str, Enum):
    """Permission role."""

    USER = "user"
    ADMIN = "admin"


class SessionTrigger(str, Enum):
    """Reason a session token is being (re)computed."""

    SIGN_IN = "signIn"
    SIGN_UP = "signUp"
    UPDATE = "update"


class Username(RootValueObject[str]):
    """Public, globally unique user handle.

    Lowercase letters, digits and underscores, 3-30 characters.
    The generator produces at most 20 characters plus a numeric suffix.
    """

    @field_validator("root")
    @classmethod
    def validate_username_format(cls, v: str) -> str:
        """Validate username format."""
        if not re.match(r"^[a-z0-9_]{3,30}$", v):
            raise ValueError(
                "Username must be 3-30 characters of lowercase letters, digits or underscores"
            )
        return v


class FederatedIdentity(ValueObject):
    """Identity asserted by an external provider.

    `user_id` is empty until sign-in has resolved the local user record.
    """

    provider: str
    provider_account_id: str
    email: str | None = None
    name: str | None = None
    image: str | None = None
    user_id: UserId | None = None


class ProviderAccount(ValueObject):
    """Provider account linked to an identity at first token issuance."""

    provider: str
    provider_account_id: str
    type: str = "oauth"
