"""Strongly typed identifiers for Guild domain entities."""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
