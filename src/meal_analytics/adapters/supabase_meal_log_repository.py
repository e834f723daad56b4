"""Supabase repository for meal logs."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from meal_analytics.adapters.supabase_errors import execute
from meal_analytics.domain.errors import StoreUnavailable
from meal_analytics.domain.meals import MealDraft, MealEntry, MealType
from meal_analytics.services.meals import MealLogRepository

_COLUMNS = (
    "id, user_id, meal_type, date, food_name, calories, protein_g, carbs_g, "
    "fat_g, fiber_g, notes, created_at"
)


@dataclass
class SupabaseMealLogRepository(MealLogRepository):
    """Supabase implementation for meal logs."""

    client: Client
    page_size: int = 1000

    def list_meals(self, user_id: UUID, start: date, end: date) -> list[MealEntry]:
        """Return all meals dated within [start, end], paging through results."""
        meals: list[MealEntry] = []
        offset = 0
        while True:
            response = execute(
                self.client.table("meal_logs")
                .select(_COLUMNS)
                .eq("user_id", str(user_id))
                .gte("date", start.isoformat())
                .lte("date", end.isoformat())
                .order("date", desc=False)
                .order("created_at", desc=False)
                .order("id", desc=False)
                .range(offset, offset + self.page_size - 1),
                "meal read",
            )
            rows = response.data or []
            meals.extend(_parse_meal(row) for row in rows)
            if len(rows) < self.page_size:
                return meals
            offset += self.page_size

    def create_meal(
        self, user_id: UUID, draft: MealDraft, day: date, created_at: datetime
    ) -> MealEntry:
        """Create a meal row and return it."""
        response = execute(
            self.client.table("meal_logs").insert(
                {
                    "user_id": str(user_id),
                    "meal_type": draft.meal_type.value,
                    "date": day.isoformat(),
                    "food_name": draft.food_name,
                    "calories": draft.calories,
                    "protein_g": draft.protein_g,
                    "carbs_g": draft.carbs_g,
                    "fat_g": draft.fat_g,
                    "fiber_g": draft.fiber_g,
                    "notes": draft.notes,
                    "created_at": created_at.isoformat(),
                }
            ),
            "meal insert",
        )
        if not response.data:
            raise StoreUnavailable("Failed to create meal log")
        return _parse_meal(response.data[0])

    def get_meal(self, meal_id: UUID) -> MealEntry | None:
        """Return a meal by id."""
        response = execute(
            self.client.table("meal_logs")
            .select(_COLUMNS)
            .eq("id", str(meal_id))
            .limit(1),
            "meal read",
        )
        if not response.data:
            return None
        return _parse_meal(response.data[0])

    def update_meal(self, meal_id: UUID, changes: dict[str, object]) -> MealEntry:
        """Apply field changes and return the updated meal."""
        payload = {
            key: value.value if isinstance(value, MealType) else value
            for key, value in changes.items()
        }
        response = execute(
            self.client.table("meal_logs").update(payload).eq("id", str(meal_id)),
            "meal update",
        )
        if not response.data:
            raise StoreUnavailable("Failed to update meal log")
        return _parse_meal(response.data[0])

    def delete_meal(self, meal_id: UUID) -> bool:
        """Delete a meal row."""
        response = execute(
            self.client.table("meal_logs").delete().eq("id", str(meal_id)),
            "meal delete",
        )
        return bool(response.data)


def _parse_meal(row: dict[str, object]) -> MealEntry:
    notes = row.get("notes")
    return MealEntry(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        meal_type=MealType(str(row["meal_type"])),
        date=date.fromisoformat(str(row["date"])[:10]),
        food_name=str(row.get("food_name") or ""),
        calories=float(row.get("calories") or 0.0),
        protein_g=float(row.get("protein_g") or 0.0),
        carbs_g=float(row.get("carbs_g") or 0.0),
        fat_g=float(row.get("fat_g") or 0.0),
        fiber_g=float(row.get("fiber_g") or 0.0),
        notes=str(notes) if notes is not None else None,
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
