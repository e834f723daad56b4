"""Domain models for statistics."""

from dataclasses import dataclass
from datetime import date
from enum import StrEnum


class PeriodKind(StrEnum):
    """Aggregation granularity."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class DailyTotals:
    """Daily total macros."""

    day: date
    meal_count: int
    calories: float
    protein_g: float
    carbs_g: float
    fat_g: float
    fiber_g: float


@dataclass(frozen=True)
class PeriodSummary:
    """Summary of a period; averages are taken over every day in the range."""

    total_meals: int
    avg_calories: int
    avg_protein_g: float
    avg_carbs_g: float
    avg_fat_g: float
    avg_fiber_g: float
    total_days: int
    days_logged: int

    @property
    def adherence_ratio(self) -> float:
        """Share of days with at least one logged meal."""
        if self.total_days == 0:
            return 0.0
        return self.days_logged / self.total_days


@dataclass(frozen=True)
class PeriodStats:
    """Per-day totals and summary for an inclusive date range."""

    period: PeriodKind
    start_date: date
    end_date: date
    daily: list[DailyTotals]
    summary: PeriodSummary
