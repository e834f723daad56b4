"""Health profile domain models."""

import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import TypeVar

from meal_analytics.domain.errors import InvalidProfile

_E = TypeVar("_E", bound=StrEnum)


class Sex(StrEnum):
    """Biological sex category used by the basal rate formula."""

    MALE = "male"
    FEMALE = "female"


class ActivityLevel(StrEnum):
    """Self-reported activity level."""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    ACTIVE = "active"
    VERY_ACTIVE = "very_active"


class Goal(StrEnum):
    """Body weight goal."""

    LOSE = "lose"
    MAINTAIN = "maintain"
    GAIN = "gain"


@dataclass(frozen=True)
class HealthProfile:
    """Validated physiological attributes of a user."""

    age: int
    weight_kg: float
    height_cm: float
    sex: Sex
    activity_level: ActivityLevel
    goal: Goal
    medical_conditions: tuple[str, ...] = ()
    allergies: tuple[str, ...] = ()
    dietary_preferences: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if isinstance(self.age, bool) or not isinstance(self.age, int):
            raise InvalidProfile("age must be an integer")
        if self.age < 0:
            raise InvalidProfile("age must not be negative")
        if not _is_positive_number(self.weight_kg):
            raise InvalidProfile("weight_kg must be a positive number")
        if not _is_positive_number(self.height_cm):
            raise InvalidProfile("height_cm must be a positive number")
        if not isinstance(self.sex, Sex):
            raise InvalidProfile("sex must be a Sex value")
        if not isinstance(self.activity_level, ActivityLevel):
            raise InvalidProfile("activity_level must be an ActivityLevel value")
        if not isinstance(self.goal, Goal):
            raise InvalidProfile("goal must be a Goal value")
        for name in ("medical_conditions", "allergies", "dietary_preferences"):
            values = getattr(self, name)
            if not isinstance(values, tuple) or not all(
                isinstance(value, str) for value in values
            ):
                raise InvalidProfile(f"{name} must be a tuple of strings")

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> "HealthProfile":
        """Build a profile from raw values, rejecting unknown enum values."""
        missing = [
            name
            for name in (
                "age",
                "weight_kg",
                "height_cm",
                "sex",
                "activity_level",
                "goal",
            )
            if raw.get(name) is None
        ]
        if missing:
            raise InvalidProfile(f"missing fields: {', '.join(missing)}")
        return cls(
            age=_coerce_int(raw["age"], "age"),
            weight_kg=_coerce_float(raw["weight_kg"], "weight_kg"),
            height_cm=_coerce_float(raw["height_cm"], "height_cm"),
            sex=_coerce_enum(Sex, raw["sex"], "sex"),
            activity_level=_coerce_enum(
                ActivityLevel, raw["activity_level"], "activity_level"
            ),
            goal=_coerce_enum(Goal, raw["goal"], "goal"),
            medical_conditions=_coerce_strings(
                raw.get("medical_conditions"), "medical_conditions"
            ),
            allergies=_coerce_strings(raw.get("allergies"), "allergies"),
            dietary_preferences=_coerce_strings(
                raw.get("dietary_preferences"), "dietary_preferences"
            ),
        )

    def to_mapping(self) -> dict[str, object]:
        """Return a plain mapping suitable for persistence."""
        return {
            "age": self.age,
            "weight_kg": self.weight_kg,
            "height_cm": self.height_cm,
            "sex": self.sex.value,
            "activity_level": self.activity_level.value,
            "goal": self.goal.value,
            "medical_conditions": list(self.medical_conditions),
            "allergies": list(self.allergies),
            "dietary_preferences": list(self.dietary_preferences),
        }


@dataclass(frozen=True)
class Targets:
    """Physiological targets derived from a health profile."""

    bmi: float
    bmi_category: str
    bmr: float
    tdee: float
    daily_calories: int
    protein_g: int
    carbs_g: int
    fat_g: int


@dataclass(frozen=True)
class ProfileAdvice:
    """AI dietary advice stored alongside a profile."""

    text: str
    recommended_foods: list[str]
    foods_to_avoid: list[str]


def _is_positive_number(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return math.isfinite(value) and value > 0


def _coerce_int(value: object, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidProfile(f"{name} must be an integer")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    raise InvalidProfile(f"{name} must be an integer")


def _coerce_float(value: object, name: str) -> float:
    if isinstance(value, bool):
        raise InvalidProfile(f"{name} must be a number")
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidProfile(f"{name} must be a number") from exc
    if not math.isfinite(number):
        raise InvalidProfile(f"{name} must be a finite number")
    return number


def _coerce_enum(enum_type: type[_E], value: object, name: str) -> _E:
    try:
        return enum_type(str(value).strip().lower())
    except ValueError as exc:
        allowed = ", ".join(member.value for member in enum_type)
        raise InvalidProfile(f"{name} must be one of: {allowed}") from exc


def _coerce_strings(value: object, name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, Iterable):
        raise InvalidProfile(f"{name} must be a list of strings")
    items = []
    for item in value:
        if not isinstance(item, str):
            raise InvalidProfile(f"{name} must be a list of strings")
        if item.strip():
            items.append(item.strip())
    return tuple(items)
