"""Session token and outward session models.

The token carries a denormalized snapshot of the user so that ordinary
requests never read the user store. Its claim names are camelCase and are
shared with the web client, so they must not change.
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# Fields copied from the user snapshot into the token (the id is set separately)
PROJECTED_FIELDS: tuple[str, ...] = (
    "display_name",
    "username",
    "image",
    "rank",
    "roles",
    "is_banned",
)


class SessionToken(BaseModel):
    """Decoded session token claims.

    Unknown claims are kept as extra fields so that merges and refreshes
    round-trip them untouched.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    id: Optional[str] = None
    display_name: Optional[str] = None
    username: Optional[str] = None
    image: Optional[str] = None
    rank: Optional[str] = None
    roles: list[str] = Field(default_factory=list)
    is_banned: bool = False

    # Registered claims, set when the token is encoded
    iat: Optional[int] = None
    exp: Optional[int] = None

    def to_claims(self) -> dict[str, Any]:
        """Wire representation (camelCase, unset optionals omitted)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> "SessionToken":
        return cls.model_validate(claims)

    def merge(self, data: dict[str, Any]) -> "SessionToken":
        """Return a token with `data` merged over this one, key by key."""
        claims = self.to_claims()
        for key, value in data.items():
            # Accept snake_case names for declared fields as well
            field = type(self).model_fields.get(key)
            claims[field.alias if field and field.alias else key] = value
        return type(self).from_claims(claims)


class SessionUser(BaseModel):
    """User object exposed to clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None
    username: Optional[str] = None
    image: Optional[str] = None
    rank: Optional[str] = None
    roles: list[str] = Field(default_factory=list)
    is_banned: bool = False


class Session(BaseModel):
    """Per-request session view built from the token. Never persisted."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user: SessionUser = Field(default_factory=SessionUser)
    expires: Optional[datetime] = None
