"""User lookup interfaces."""

from typing import Protocol
from uuid import UUID

from meal_analytics.domain.models import UserContact


class UserDirectory(Protocol):
    """Read interface for user contact details."""

    def get_contact(self, user_id: UUID) -> UserContact | None:
        """Return the user's contact details, if the user exists."""
