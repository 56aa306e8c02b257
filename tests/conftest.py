"""Test configuration and shared helpers."""

from datetime import datetime, timezone
from uuid import uuid4

from guild.config import AuthSettings, Settings
from guild.domain.model import User
from guild.domain.value import AuthProvider, FederatedIdentity, Rank, Role, UserId, Username

ADMIN_EMAIL = "admin@x.com"


def make_settings(*admin_emails: str, **auth_overrides) -> Settings:
    """Test settings, optionally with an admin allow-list.

    Args:
        admin_emails: Up to two allow-listed e-mails
        auth_overrides: Extra AuthSettings fields
    """
    emails = list(admin_emails) + [None, None]
    return Settings(
        environment="test",
        host="localhost",
        port=8000,
        auth=AuthSettings(
            jwt_secret="test-secret-key-with-enough-length-for-hs256",
            admin_email_1=emails[0],
            admin_email_2=emails[1],
            **auth_overrides,
        ),
    )


def make_identity(
    email: str | None = "user@x.com",
    provider: str = AuthProvider.GOOGLE.value,
    name: str | None = "Test User",
    provider_account_id: str = "provider-account-1",
) -> FederatedIdentity:
    """Identity as a provider callback would assert it."""
    return FederatedIdentity(
        provider=provider,
        provider_account_id=provider_account_id,
        email=email,
        name=name,
        image="https://example.com/avatar.png",
    )


def make_user(
    email: str = "user@x.com",
    username: str = "test_user",
    rank: Rank = Rank.RECRUIT,
    roles: list[Role] | None = None,
    **fields,
) -> User:
    """Stored user with sensible defaults."""
    created = datetime(2026, 1, 1, tzinfo=timezone.utc)
    return User(
        id=UserId(uuid4()),
        email=email,
        display_name=fields.pop("display_name", "Test User"),
        username=Username(username),
        rank=rank,
        roles=roles if roles is not None else [Role.USER],
        created_at=created,
        updated_at=created,
        **fields,
    )
