"""Meal logging service."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from meal_analytics.domain.errors import MealNotFound
from meal_analytics.domain.meals import MealChanges, MealDraft, MealEntry
from meal_analytics.domain.stats import DailyTotals
from meal_analytics.services.stats import MealLogReader, daily_totals, today_in


class MealLogRepository(MealLogReader, Protocol):
    """Persistence interface for meal logs."""

    def create_meal(
        self, user_id: UUID, draft: MealDraft, day: date, created_at: datetime
    ) -> MealEntry:
        """Create a meal row and return it."""

    def get_meal(self, meal_id: UUID) -> MealEntry | None:
        """Return a meal by id."""

    def update_meal(self, meal_id: UUID, changes: dict[str, object]) -> MealEntry:
        """Apply field changes to a meal and return the updated row."""

    def delete_meal(self, meal_id: UUID) -> bool:
        """Delete a meal; return False when nothing was deleted."""


@dataclass(frozen=True)
class DailyMeals:
    """Meals logged on one day with their totals."""

    day: date
    meals: list[MealEntry]
    totals: DailyTotals


@dataclass
class MealLogService:
    """Service for logging and editing meals."""

    repository: MealLogRepository

    def log_meal(
        self, user_id: UUID, draft: MealDraft, timezone_name: str = "UTC"
    ) -> MealEntry:
        """Persist a meal on its own date, or today in the user's timezone."""
        now = datetime.now(tz=UTC)
        day = draft.date or today_in(timezone_name, now)
        return self.repository.create_meal(user_id, draft, day, now)

    def update_meal(
        self, user_id: UUID, meal_id: UUID, changes: MealChanges
    ) -> MealEntry:
        """Update a meal owned by the user. The meal date never changes."""
        current = self._owned_meal(user_id, meal_id)
        values = changes.as_dict()
        if not values:
            return current
        return self.repository.update_meal(meal_id, values)

    def delete_meal(self, user_id: UUID, meal_id: UUID) -> None:
        """Delete a meal owned by the user."""
        self._owned_meal(user_id, meal_id)
        if not self.repository.delete_meal(meal_id):
            raise MealNotFound(f"meal {meal_id} not found")

    def list_day(self, user_id: UUID, day: date) -> list[MealEntry]:
        """Return the user's meals for one calendar day."""
        return self.repository.list_meals(user_id, day, day)

    def daily_view(
        self, user_id: UUID, day: date | None = None, timezone_name: str = "UTC"
    ) -> DailyMeals:
        """Return one day of meals with totals; defaults to today in the timezone."""
        resolved = day or today_in(timezone_name)
        meals = self.list_day(user_id, resolved)
        return DailyMeals(
            day=resolved, meals=meals, totals=daily_totals(resolved, meals)
        )

    def _owned_meal(self, user_id: UUID, meal_id: UUID) -> MealEntry:
        meal = self.repository.get_meal(meal_id)
        if meal is None or meal.user_id != user_id:
            raise MealNotFound(f"meal {meal_id} not found")
        return meal
