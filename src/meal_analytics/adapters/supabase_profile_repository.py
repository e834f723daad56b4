"""Supabase repository for health profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from meal_analytics.adapters.supabase_errors import execute
from meal_analytics.domain.profile import HealthProfile, ProfileAdvice
from meal_analytics.services.profiles import ProfileRepository

_PROFILE_COLUMNS = (
    "age, weight_kg, height_cm, sex, activity_level, goal, "
    "medical_conditions, allergies, dietary_preferences"
)
_ADVICE_COLUMNS = "ai_recommendations, recommended_foods, foods_to_avoid"


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for health profiles."""

    client: Client

    def get_profile(self, user_id: UUID) -> HealthProfile | None:
        """Return the stored profile for a user."""
        response = execute(
            self.client.table("health_profiles")
            .select(_PROFILE_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1),
            "profile read",
        )
        if not response.data:
            return None
        return HealthProfile.from_mapping(response.data[0])

    def get_advice(self, user_id: UUID) -> ProfileAdvice | None:
        """Return the AI advice stored on the profile row."""
        response = execute(
            self.client.table("health_profiles")
            .select(_ADVICE_COLUMNS)
            .eq("user_id", str(user_id))
            .limit(1),
            "profile advice read",
        )
        if not response.data:
            return None
        row = response.data[0]
        if not row.get("ai_recommendations"):
            return None
        return ProfileAdvice(
            text=row["ai_recommendations"],
            recommended_foods=list(row.get("recommended_foods") or []),
            foods_to_avoid=list(row.get("foods_to_avoid") or []),
        )

    def save_profile(
        self,
        user_id: UUID,
        profile: HealthProfile,
        advice: ProfileAdvice | None = None,
    ) -> None:
        """Insert or replace the user's profile row and its advice."""
        execute(
            self.client.table("health_profiles").upsert(
                {
                    "user_id": str(user_id),
                    **profile.to_mapping(),
                    "ai_recommendations": advice.text if advice else None,
                    "recommended_foods": advice.recommended_foods if advice else [],
                    "foods_to_avoid": advice.foods_to_avoid if advice else [],
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="user_id",
            ),
            "profile write",
        )
