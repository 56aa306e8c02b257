"""User aggregate root.

Users sign in through Discord or Google and are keyed by their e-mail,
so accounts from different providers sharing an address resolve to the
same user.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import Field, field_validator

from guild.domain.model.common import DomainModel
from guild.domain.value import Rank, Role, UserId, Username


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ContributionStats(DomainModel):
    """Counters for community contributions."""

    contribution_points: int = Field(default=0, ge=0)
    feedback_submitted: int = Field(default=0, ge=0)
    bugs_reported: int = Field(default=0, ge=0)
    features_proposed: int = Field(default=0, ge=0)
    data_corrections: int = Field(default=0, ge=0)
    corrections_accepted: int = Field(default=0, ge=0)


class Preferences(DomainModel):
    """User-controlled settings."""

    email_notifications: bool = False
    public_profile: bool = True
    show_contributions: bool = True


class User(DomainModel):
    """User aggregate root."""

    id: UserId
    email: str
    display_name: Optional[str] = None
    username: Username
    image: Optional[str] = None
    vr_headset: Optional[str] = None

    # Gamification
    level: int = Field(default=1, ge=1)
    rank: Rank = Rank.RECRUIT
    badges: list[str] = Field(default_factory=list)
    stats: ContributionStats = Field(default_factory=ContributionStats)

    # Permissions
    roles: list[Role] = Field(default_factory=lambda: [Role.USER])

    preferences: Preferences = Field(default_factory=Preferences)

    # Moderation
    is_active: bool = True
    is_banned: bool = False

    last_login_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        """Emails are stored lower-cased."""
        return v.strip().lower()

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles


class UserSnapshot(DomainModel):
    """Projection of the user fields embedded in session tokens."""

    id: UserId
    display_name: Optional[str] = None
    username: Username
    image: Optional[str] = None
    rank: Rank
    roles: list[Role] = Field(default_factory=list)
    is_banned: bool = False
