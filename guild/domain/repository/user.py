"""User repository interface."""

from abc import ABC, abstractmethod
from typing import Optional

from guild.domain.model.user import User, UserSnapshot
from guild.domain.value import UserId, Username


class UserRepository(ABC):
    """Repository for User aggregate.

    Defines the contract for user persistence operations.
    Implementations live in the persistence layer. Implementations must
    enforce uniqueness of e-mail and username.
    """

    @abstractmethod
    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: The user's unique identifier

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_snapshot_by_id(self, user_id: UserId) -> Optional[UserSnapshot]:
        """Read only the fields embedded in session tokens.

        Args:
            user_id: The user's unique identifier

        Returns:
            The snapshot if the user exists, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their (lower-cased) e-mail.

        Args:
            email: The user's email address

        Returns:
            The user if found, None otherwise
        """
        pass

    @abstractmethod
    async def find_by_username(self, username: Username) -> Optional[User]:
        """Find a user by username."""
        pass

    @abstractmethod
    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Args:
            user: The user to save

        Returns:
            The saved user
        """
        pass
