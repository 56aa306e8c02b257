"""Repository interfaces for the Guild domain.

Repository interfaces are defined in the domain layer (dependency inversion).
Implementations live in the persistence layer.
"""

from guild.domain.repository.user import UserRepository

__all__ = ["UserRepository"]
