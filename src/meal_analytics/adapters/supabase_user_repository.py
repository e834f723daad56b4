"""Supabase-backed user directory."""

from dataclasses import dataclass
from uuid import UUID

from supabase import Client

from meal_analytics.adapters.supabase_errors import execute
from meal_analytics.domain.models import UserContact
from meal_analytics.services.users import UserDirectory


@dataclass
class SupabaseUserDirectory(UserDirectory):
    """Supabase implementation for user contact lookups."""

    client: Client

    def get_contact(self, user_id: UUID) -> UserContact | None:
        """Return the email and display name for a user id, if present."""
        response = execute(
            self.client.table("users")
            .select("id, email, name")
            .eq("id", str(user_id))
            .limit(1),
            "user read",
        )
        if not response.data:
            return None
        row = response.data[0]
        email = row.get("email")
        if not email:
            return None
        name = row.get("name")
        return UserContact(
            id=UUID(str(row["id"])),
            email=str(email),
            name=str(name) if name else None,
        )
