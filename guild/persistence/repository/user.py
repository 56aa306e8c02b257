"""PostgreSQL implementation of User repository."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from guild.domain.model import User, UserSnapshot
from guild.domain.repository import UserRepository
from guild.domain.value import UserId, Username
from guild.persistence.mappers import row_to_user, row_to_user_snapshot, user_to_dict
from guild.persistence.tables import users_table


class PostgresUserRepository(UserRepository):
    """PostgreSQL implementation of UserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def find_by_id(self, user_id: UserId) -> Optional[User]:
        """Find a user by ID.

        Args:
            user_id: User ID to look up

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_snapshot_by_id(self, user_id: UserId) -> Optional[UserSnapshot]:
        """Read only the columns embedded in session tokens.

        Args:
            user_id: User ID to look up

        Returns:
            Snapshot if found, None otherwise
        """
        stmt = select(
            users_table.c.id,
            users_table.c.display_name,
            users_table.c.username,
            users_table.c.image,
            users_table.c.rank,
            users_table.c.roles,
            users_table.c.is_banned,
        ).where(users_table.c.id == user_id)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user_snapshot(dict(row)) if row else None

    async def find_by_email(self, email: str) -> Optional[User]:
        """Find a user by their email.

        Args:
            email: Lower-cased email to search for

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.email == email)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def find_by_username(self, username: Username) -> Optional[User]:
        """Find a user by username.

        Args:
            username: Username to search for

        Returns:
            User if found, None otherwise
        """
        stmt = select(users_table).where(users_table.c.username == username.root)
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_user(dict(row)) if row else None

    async def save(self, user: User) -> User:
        """Save a user (create or update).

        Runs inside a savepoint so a unique-index violation (two first
        sign-ins for the same e-mail) leaves the request transaction usable.

        Args:
            user: User to save

        Returns:
            Saved user

        Raises:
            IntegrityError: If the e-mail or username is already taken
        """
        user_dict = user_to_dict(user)

        async with self.session.begin_nested():
            exists = await self.session.scalar(
                select(users_table.c.id).where(users_table.c.id == user.id)
            )

            if exists:
                stmt = (
                    users_table.update()
                    .where(users_table.c.id == user.id)
                    .values(**user_dict)
                )
            else:
                stmt = users_table.insert().values(**user_dict)

            await self.session.execute(stmt)
            await self.session.flush()

        return user
