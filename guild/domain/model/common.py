"""Base model for all domain entities."""

from pydantic import BaseModel, ConfigDict


class DomainModel(BaseModel):
    """Base class for domain entities.

    Entities are immutable; changes go through `model_copy(update=...)`.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)
