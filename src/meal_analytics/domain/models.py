"""Domain models for the analytics service."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class UserContact:
    """Where a user's report notifications are delivered."""

    id: UUID
    email: str
    name: str | None
