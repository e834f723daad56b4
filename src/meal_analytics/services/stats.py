"""Statistics service for meal logs."""

import calendar
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from meal_analytics.domain.errors import InvalidRange, RangeTooLarge
from meal_analytics.domain.meals import MealEntry
from meal_analytics.domain.stats import (
    DailyTotals,
    PeriodKind,
    PeriodStats,
    PeriodSummary,
)

DAYS_PER_WEEK = 7

_logger = logging.getLogger(__name__)


class MealLogReader(Protocol):
    """Read interface for logged meals."""

    def list_meals(self, user_id: UUID, start: date, end: date) -> list[MealEntry]:
        """Return every meal of the user dated within [start, end]."""


@dataclass(frozen=True)
class StatsConfig:
    """Limits applied to aggregation queries."""

    max_range_days: int = 366


@dataclass
class StatsService:
    """Service that aggregates meals into calendar-day statistics."""

    reader: MealLogReader
    config: StatsConfig = field(default_factory=StatsConfig)

    def aggregate(
        self, user_id: UUID, period: PeriodKind, start: date, end: date
    ) -> PeriodStats:
        """Return per-day totals and averages over the inclusive range."""
        total_days = validate_range(start, end, self.config.max_range_days)
        meals = self.reader.list_meals(user_id, start, end)
        daily = _aggregate_days(start, total_days, meals)
        return PeriodStats(
            period=period,
            start_date=start,
            end_date=end,
            daily=daily,
            summary=_summarize(daily),
        )

    def get_period(
        self,
        user_id: UUID,
        period: PeriodKind,
        timezone_name: str,
        now: datetime | None = None,
    ) -> PeriodStats:
        """Aggregate the calendar period containing today in the user's timezone."""
        start, end = period_bounds(period, today_in(timezone_name, now))
        return self.aggregate(user_id, period, start, end)


def validate_range(start: date, end: date, max_range_days: int) -> int:
    """Return the number of days in the range or raise on invalid input."""
    if end < start:
        raise InvalidRange(
            f"end_date {end.isoformat()} is before start_date {start.isoformat()}"
        )
    total_days = (end - start).days + 1
    if total_days > max_range_days:
        raise RangeTooLarge(
            f"range spans {total_days} days, maximum is {max_range_days}"
        )
    return total_days


def today_in(timezone_name: str, now: datetime | None = None) -> date:
    """Return the current calendar date in an IANA timezone."""
    try:
        tz = ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidRange(f"unknown timezone {timezone_name!r}") from exc
    current = now or datetime.now(tz=UTC)
    return current.astimezone(tz).date()


def period_bounds(period: PeriodKind, reference: date) -> tuple[date, date]:
    """Return the calendar-aligned inclusive range that contains reference."""
    if period is PeriodKind.DAILY:
        return reference, reference
    if period is PeriodKind.WEEKLY:
        start = reference - timedelta(days=reference.weekday())
        return start, start + timedelta(days=DAYS_PER_WEEK - 1)
    if period is PeriodKind.MONTHLY:
        last_day = calendar.monthrange(reference.year, reference.month)[1]
        return reference.replace(day=1), reference.replace(day=last_day)
    return date(reference.year, 1, 1), date(reference.year, 12, 31)


def daily_totals(day: date, meals: list[MealEntry]) -> DailyTotals:
    """Sum the meals logged on one day."""
    return DailyTotals(
        day=day,
        meal_count=len(meals),
        calories=sum(meal.calories for meal in meals),
        protein_g=sum(meal.protein_g for meal in meals),
        carbs_g=sum(meal.carbs_g for meal in meals),
        fat_g=sum(meal.fat_g for meal in meals),
        fiber_g=sum(meal.fiber_g for meal in meals),
    )


def _aggregate_days(
    start: date, total_days: int, meals: list[MealEntry]
) -> list[DailyTotals]:
    by_day: dict[date, list[MealEntry]] = defaultdict(list)
    end = start + timedelta(days=total_days - 1)
    for meal in meals:
        if not start <= meal.date <= end:
            _logger.warning(
                "Ignoring meal outside requested range",
                extra={"meal_id": str(meal.id), "meal_date": meal.date.isoformat()},
            )
            continue
        by_day[meal.date].append(meal)

    daily = []
    for offset in range(total_days):
        day = start + timedelta(days=offset)
        daily.append(daily_totals(day, by_day.get(day, [])))
    return daily


def _summarize(daily: list[DailyTotals]) -> PeriodSummary:
    total_days = max(len(daily), 1)
    return PeriodSummary(
        total_meals=sum(day.meal_count for day in daily),
        avg_calories=round(sum(day.calories for day in daily) / total_days),
        avg_protein_g=round(sum(day.protein_g for day in daily) / total_days, 1),
        avg_carbs_g=round(sum(day.carbs_g for day in daily) / total_days, 1),
        avg_fat_g=round(sum(day.fat_g for day in daily) / total_days, 1),
        avg_fiber_g=round(sum(day.fiber_g for day in daily) / total_days, 1),
        total_days=len(daily),
        days_logged=sum(1 for day in daily if day.meal_count > 0),
    )
