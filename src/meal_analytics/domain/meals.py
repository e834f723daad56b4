"""Domain models for meal logging."""

import datetime as dt
import math
from dataclasses import dataclass
from enum import StrEnum
from uuid import UUID

from meal_analytics.domain.errors import InvalidMeal

MACRO_FIELDS = ("calories", "protein_g", "carbs_g", "fat_g", "fiber_g")


class MealType(StrEnum):
    """Meal slot within a day."""

    BREAKFAST = "breakfast"
    LUNCH = "lunch"
    DINNER = "dinner"
    SNACK = "snack"


@dataclass(frozen=True)
class MealDraft:
    """Meal values supplied when logging a new meal."""

    meal_type: MealType
    food_name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float = 0.0
    notes: str | None = None
    date: dt.date | None = None

    def __post_init__(self) -> None:
        _validate_meal_type(self.meal_type)
        _validate_macros(self)


@dataclass(frozen=True)
class MealChanges:
    """Partial update for a logged meal. The meal date cannot be changed."""

    meal_type: MealType | None = None
    food_name: str | None = None
    calories: float | None = None
    protein_g: float | None = None
    carbs_g: float | None = None
    fat_g: float | None = None
    fiber_g: float | None = None
    notes: str | None = None

    def __post_init__(self) -> None:
        if self.meal_type is not None:
            _validate_meal_type(self.meal_type)
        _validate_macros(self)

    def as_dict(self) -> dict[str, object]:
        """Return only the fields that were set."""
        values: dict[str, object] = {}
        for name in ("meal_type", "food_name", *MACRO_FIELDS, "notes"):
            value = getattr(self, name)
            if value is not None:
                values[name] = value
        return values


@dataclass(frozen=True)
class MealEntry:
    """A logged meal."""

    id: UUID
    user_id: UUID
    meal_type: MealType
    date: dt.date
    food_name: str
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float
    notes: str | None
    created_at: dt.datetime

    def __post_init__(self) -> None:
        _validate_meal_type(self.meal_type)
        _validate_macros(self)


def _validate_meal_type(meal_type: object) -> None:
    if not isinstance(meal_type, MealType):
        raise InvalidMeal("meal_type must be a MealType value")


def _validate_macros(record: object) -> None:
    for name in MACRO_FIELDS:
        value = getattr(record, name)
        if value is None:
            continue
        if isinstance(value, bool) or not isinstance(value, int | float):
            raise InvalidMeal(f"{name} must be a number")
        if not math.isfinite(value):
            raise InvalidMeal(f"{name} must be a finite number")
        if value < 0:
            raise InvalidMeal(f"{name} must not be negative")
