"""User domain service."""

import logfire

from guild.domain.model import User, UserSnapshot
from guild.domain.repository import UserRepository
from guild.domain.value import UserId


class UserService:
    """Domain service for user operations."""

    def __init__(self, user_repository: UserRepository) -> None:
        """Initialize user service.

        Args:
            user_repository: User repository
        """
        self.user_repository = user_repository

    async def get_user_by_email(self, email: str) -> User | None:
        """Get user by e-mail (lower-cased before lookup).

        Args:
            email: User email

        Returns:
            User if found, None otherwise
        """
        normalized = email.strip().lower()
        with logfire.span("user_service.get_user_by_email", email=normalized):
            user = await self.user_repository.find_by_email(normalized)
            if user:
                logfire.info("User found", email=normalized, user_id=str(user.id))
            else:
                logfire.info("No user for email", email=normalized)
            return user

    async def get_snapshot(self, user_id: UserId) -> UserSnapshot | None:
        """Get the token projection of a user.

        Args:
            user_id: User ID

        Returns:
            Snapshot if the user exists, None otherwise
        """
        with logfire.span("user_service.get_snapshot", user_id=str(user_id)):
            snapshot = await self.user_repository.find_snapshot_by_id(user_id)
            if not snapshot:
                logfire.warn("User snapshot not found", user_id=str(user_id))
            return snapshot

    async def save(self, user: User) -> User:
        """Save user (create or update).

        Args:
            user: User to save

        Returns:
            Saved user
        """
        with logfire.span(
            "user_service.save", user_id=str(user.id), username=user.username.root
        ):
            saved = await self.user_repository.save(user)
            logfire.info("User saved", user_id=str(saved.id), username=saved.username.root)
            return saved
