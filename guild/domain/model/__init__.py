"""Domain model entities for Guild."""

from guild.domain.model.session import (
    PROJECTED_FIELDS,
    Session,
    SessionToken,
    SessionUser,
)
from guild.domain.model.user import (
    ContributionStats,
    Preferences,
    User,
    UserSnapshot,
)

__all__ = [
    "ContributionStats",
    "PROJECTED_FIELDS",
    "Preferences",
    "Session",
    "SessionToken",
    "SessionUser",
    "User",
    "UserSnapshot",
]
