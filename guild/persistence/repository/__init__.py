"""PostgreSQL repository implementations."""

from guild.persistence.repository.user import PostgresUserRepository

__all__ = ["PostgresUserRepository"]
