"""In-memory user repository for testing."""

from typing import Optional

from guild.domain.error import StoreError
from guild.domain.model.user import User, UserSnapshot
from guild.domain.repository.user import UserRepository
from guild.domain.value import UserId, Username


class InMemoryUserRepository(UserRepository):
    """In-memory implementation of UserRepository for testing.

    Mirrors the unique indexes on e-mail and username by raising StoreError.
    `save_count` and `snapshot_reads` let tests assert how often the store
    was touched.
    """

    def __init__(self) -> None:
        self._users: dict[UserId, User] = {}
        self.save_count = 0
        self.snapshot_reads = 0

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID."""
        return self._users.get(user_id)

    async def find_snapshot_by_id(self, user_id: UserId) -> Optional[UserSnapshot]:
        """Project the token fields of a user."""
        self.snapshot_reads += 1
        user = self._users.get(user_id)
        if not user:
            return None
        return UserSnapshot(
            id=user.id,
            display_name=user.display_name,
            username=user.username,
            image=user.image,
            rank=user.rank,
            roles=list(user.roles),
            is_banned=user.is_banned,
        )

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email."""
        for user in self._users.values():
            if user.email == email:
                return user
        return None

    async def find_by_username(self, username: Username) -> Optional[User]:
        """Find a user by username."""
        for user in self._users.values():
            if user.username == username:
                return user
        return None

    async def save(self, user: User) -> User:
        """Save or update a user."""
        for other in self._users.values():
            if other.id == user.id:
                continue
            if other.email == user.email:
                raise StoreError(f"Email already registered: {user.email}")
            if other.username == user.username:
                raise StoreError(f"Username already taken: {user.username}")

        self._users[user.id] = user
        self.save_count += 1
        return user

    def all(self) -> list[User]:
        """Every stored user, in insertion order."""
        return list(self._users.values())
