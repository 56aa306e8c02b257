"""Sign-in reconciliation policy.

Pure functions deciding what a user record looks like after a federated
sign-in. Callers own all I/O: they look the record up, call into here, and
save whatever comes back.
"""

from collections.abc import Iterable
from datetime import datetime
from uuid import uuid4

from guild.domain.model.user import ContributionStats, Preferences, User
from guild.domain.value import FederatedIdentity, Rank, Role, UserId, Username


def normalize_email(email: str) -> str:
    return email.strip().lower()


def is_privileged(email: str | None, admin_emails: Iterable[str]) -> bool:
    """Whether `email` is on the admin allow-list (case-insensitive).

    Args:
        email: Address asserted by the provider
        admin_emails: Allow-list entries; blank entries are ignored

    Returns:
        True if the address is allow-listed
    """
    if not email:
        return False
    allowed = {normalize_email(entry) for entry in admin_emails if entry and entry.strip()}
    return normalize_email(email) in allowed


def build_new_user(
    identity: FederatedIdentity,
    username: Username,
    admin_emails: Iterable[str],
    now: datetime,
) -> User:
    """Create the record for a previously unseen e-mail.

    Allow-listed addresses start as elite admins; everyone else starts as a
    recruit with the plain user role. Gamification and preference fields
    take their defaults.

    Raises:
        ValueError: If the identity carries no e-mail
    """
    if not identity.email:
        raise ValueError("Cannot create a user without an e-mail")

    privileged = is_privileged(identity.email, admin_emails)

    return User(
        id=UserId(uuid4()),
        email=normalize_email(identity.email),
        display_name=identity.name,
        username=username,
        image=identity.image,
        vr_headset=None,
        level=1,
        rank=Rank.ELITE if privileged else Rank.RECRUIT,
        badges=[],
        stats=ContributionStats(),
        roles=[Role.USER, Role.ADMIN] if privileged else [Role.USER],
        preferences=Preferences(),
        is_active=True,
        is_banned=False,
        last_login_at=now,
        created_at=now,
        updated_at=now,
    )


def reconcile(
    existing: User,
    identity: FederatedIdentity,
    admin_emails: Iterable[str],
    now: datetime,
) -> tuple[User, bool]:
    """Apply a repeat sign-in to an existing record.

    An allow-listed address that does not hold the admin role gains it and
    is raised to elite. Nothing is ever revoked here. The last-login
    timestamp is always refreshed, so the second element (whether the
    record must be saved) is always True.

    Args:
        existing: Record found by e-mail
        identity: Identity asserted by the provider
        admin_emails: Admin allow-list
        now: Sign-in time

    Returns:
        Tuple of (updated record, needs save)
    """
    update: dict = {}

    if is_privileged(identity.email, admin_emails) and Role.ADMIN not in existing.roles:
        update["roles"] = [*existing.roles, Role.ADMIN]
        update["rank"] = Rank.ELITE

    update["last_login_at"] = now
    update["updated_at"] = now

    return existing.model_copy(update=update), True


def was_promoted(before: User, after: User) -> bool:
    return Role.ADMIN not in before.roles and Role.ADMIN in after.roles
