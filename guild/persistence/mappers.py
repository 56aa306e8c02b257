"""Mappers for converting between database rows and domain models.

Since we're using Pydantic domain models (immutable), we use manual mapping
instead of SQLAlchemy's classical imperative mapping.
"""

from typing import Any, Dict
from uuid import UUID

from guild.domain.model import ContributionStats, Preferences, User, UserSnapshot
from guild.domain.value import Rank, Role, UserId, Username


def _user_id(value: Any) -> UserId:
    return UserId(UUID(value) if isinstance(value, str) else value)


def _roles(values: list[str] | None) -> list[Role]:
    return [Role(value) for value in values or []]


def row_to_user(row: Dict[str, Any]) -> User:
    """Convert database row to User domain model.

    Args:
        row: Database row as dict

    Returns:
        User domain model
    """
    return User(
        id=_user_id(row["id"]),
        email=row["email"],
        display_name=row.get("display_name"),
        username=Username(row["username"]),
        image=row.get("image"),
        vr_headset=row.get("vr_headset"),
        level=row["level"],
        rank=Rank(row["rank"]),
        badges=list(row.get("badges") or []),
        stats=ContributionStats(**(row.get("stats") or {})),
        roles=_roles(row.get("roles")),
        preferences=Preferences(**(row.get("preferences") or {})),
        is_active=row["is_active"],
        is_banned=row["is_banned"],
        last_login_at=row.get("last_login_at"),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )


def row_to_user_snapshot(row: Dict[str, Any]) -> UserSnapshot:
    """Convert a projected row to a UserSnapshot.

    Args:
        row: Row holding the token columns only

    Returns:
        UserSnapshot domain model
    """
    return UserSnapshot(
        id=_user_id(row["id"]),
        display_name=row.get("display_name"),
        username=Username(row["username"]),
        image=row.get("image"),
        rank=Rank(row["rank"]),
        roles=_roles(row.get("roles")),
        is_banned=row["is_banned"],
    )


def user_to_dict(user: User) -> Dict[str, Any]:
    """Convert User domain model to database dict.

    Args:
        user: User domain model

    Returns:
        Dict suitable for database insertion/update
    """
    return {
        "id": user.id,
        "email": user.email,
        "display_name": user.display_name,
        "username": user.username.root,
        "image": user.image,
        "vr_headset": user.vr_headset,
        "level": user.level,
        "rank": user.rank.value,
        "badges": list(user.badges),
        "stats": user.stats.model_dump(),
        "roles": [role.value for role in user.roles],
        "preferences": user.preferences.model_dump(),
        "is_active": user.is_active,
        "is_banned": user.is_banned,
        "last_login_at": user.last_login_at,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }
