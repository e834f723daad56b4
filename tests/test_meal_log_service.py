"""Tests for meal logging service."""

from datetime import date
from uuid import uuid4

import pytest

from meal_analytics.domain.errors import InvalidMeal, MealNotFound
from meal_analytics.domain.meals import MealChanges, MealDraft, MealType
from meal_analytics.services.meals import MealLogService
from meal_analytics.services.stats import today_in
from tests.conftest import InMemoryMealLogRepository, make_meal


def _draft(**overrides: object) -> MealDraft:
    values: dict[str, object] = {
        "meal_type": MealType.DINNER,
        "food_name": "Salmon bowl",
        "calories": 650,
        "protein_g": 40,
        "carbs_g": 70,
        "fat_g": 22,
        "fiber_g": 6,
    }
    values.update(overrides)
    return MealDraft(**values)  # type: ignore[arg-type]


def test_log_meal_uses_given_date() -> None:
    repo = InMemoryMealLogRepository()
    service = MealLogService(repo)
    user_id = uuid4()

    meal = service.log_meal(user_id, _draft(date=date(2024, 5, 1)))

    assert meal.date == date(2024, 5, 1)
    assert meal.user_id == user_id
    assert service.list_day(user_id, date(2024, 5, 1)) == [meal]


def test_log_meal_defaults_to_today_in_timezone() -> None:
    service = MealLogService(InMemoryMealLogRepository())

    meal = service.log_meal(uuid4(), _draft(), "Pacific/Auckland")

    assert meal.date == today_in("Pacific/Auckland", meal.created_at)


@pytest.mark.parametrize(
    "overrides",
    [
        {"calories": -1},
        {"protein_g": "lots"},
        {"meal_type": "brunch"},
        {"calories": float("inf")},
        {"fat_g": float("nan")},
    ],
)
def test_meal_draft_rejects_invalid_values(overrides: dict[str, object]) -> None:
    with pytest.raises(InvalidMeal):
        _draft(**overrides)


def test_update_meal_keeps_date() -> None:
    repo = InMemoryMealLogRepository()
    service = MealLogService(repo)
    user_id = uuid4()
    meal = service.log_meal(user_id, _draft(date=date(2024, 5, 1)))

    updated = service.update_meal(
        user_id, meal.id, MealChanges(calories=700, notes="extra rice")
    )

    assert updated.calories == 700
    assert updated.notes == "extra rice"
    assert updated.protein_g == 40
    assert updated.date == date(2024, 5, 1)


def test_update_meal_without_changes_returns_current() -> None:
    repo = InMemoryMealLogRepository()
    service = MealLogService(repo)
    user_id = uuid4()
    meal = service.log_meal(user_id, _draft(date=date(2024, 5, 1)))

    assert service.update_meal(user_id, meal.id, MealChanges()) == meal


def test_meal_changes_as_dict_only_includes_set_fields() -> None:
    changes = MealChanges(meal_type=MealType.SNACK, fat_g=0.0)

    assert changes.as_dict() == {"meal_type": MealType.SNACK, "fat_g": 0.0}
    with pytest.raises(InvalidMeal):
        MealChanges(carbs_g=-5)


def test_other_users_cannot_touch_meal() -> None:
    repo = InMemoryMealLogRepository()
    service = MealLogService(repo)
    meal = service.log_meal(uuid4(), _draft(date=date(2024, 5, 1)))

    with pytest.raises(MealNotFound):
        service.update_meal(uuid4(), meal.id, MealChanges(calories=1))
    with pytest.raises(MealNotFound):
        service.delete_meal(uuid4(), meal.id)
    assert meal.id in repo.meals


def test_delete_meal() -> None:
    repo = InMemoryMealLogRepository()
    service = MealLogService(repo)
    user_id = uuid4()
    meal = service.log_meal(user_id, _draft(date=date(2024, 5, 1)))

    service.delete_meal(user_id, meal.id)

    assert repo.meals == {}
    with pytest.raises(MealNotFound):
        service.delete_meal(user_id, meal.id)


def test_meal_draft_date_is_optional() -> None:
    draft = _draft()

    assert draft.date is None
    assert _draft(date=date(2024, 5, 1)).date == date(2024, 5, 1)


def test_meal_changes_reject_non_finite_values() -> None:
    with pytest.raises(InvalidMeal, match="finite"):
        MealChanges(protein_g=float("inf"))


def test_daily_view_includes_totals() -> None:
    repo = InMemoryMealLogRepository()
    user_id = uuid4()
    day = date(2024, 5, 1)
    repo.add(
        make_meal(user_id, day, 500, protein_g=30, carbs_g=50, fat_g=15, fiber_g=4),
        make_meal(user_id, day, 300, protein_g=10, carbs_g=40, fat_g=5, fiber_g=2),
        make_meal(user_id, date(2024, 5, 2), 900),
        make_meal(uuid4(), day, 700),
    )

    view = MealLogService(repo).daily_view(user_id, day)

    assert view.day == day
    assert len(view.meals) == 2
    assert view.totals.meal_count == 2
    assert view.totals.calories == 800
    assert view.totals.protein_g == 40
    assert view.totals.carbs_g == 90
    assert view.totals.fat_g == 20
    assert view.totals.fiber_g == 6


def test_daily_view_defaults_to_today_in_timezone() -> None:
    repo = InMemoryMealLogRepository()
    service = MealLogService(repo)
    user_id = uuid4()
    meal = service.log_meal(user_id, _draft(), "Asia/Tokyo")

    view = service.daily_view(user_id, timezone_name="Asia/Tokyo")

    assert view.day == meal.date
    assert view.meals == [meal]
    assert view.totals.calories == 650
