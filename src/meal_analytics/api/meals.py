"""Meal log endpoints."""

import datetime as dt
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from meal_analytics.api.dependencies import current_user_id
from meal_analytics.api.models import (
    DailyMealsResponse,
    MealCreateRequest,
    MealData,
    MealUpdateRequest,
    daily_meals_response,
    meal_data,
)
from meal_analytics.containers import AppContainer
from meal_analytics.domain.meals import MealChanges, MealDraft

router = APIRouter(prefix="/meals", tags=["meals"])


@router.post("", status_code=status.HTTP_201_CREATED)
async def log_meal(
    body: MealCreateRequest,
    request: Request,
    timezone: str = Query(default="UTC"),
    user_id: UUID = Depends(current_user_id),
) -> MealData:
    """Log a meal; it is dated today in the caller's timezone unless given."""
    container: AppContainer = request.app.state.container
    draft = MealDraft(**body.model_dump())
    meal = container.meal_log_service.log_meal(user_id, draft, timezone)
    return meal_data(meal)


@router.get("")
async def list_meals(
    request: Request,
    date: dt.date | None = Query(default=None),
    timezone: str = Query(default="UTC"),
    user_id: UUID = Depends(current_user_id),
) -> DailyMealsResponse:
    """Return the caller's meals and totals for one day, today by default."""
    container: AppContainer = request.app.state.container
    view = container.meal_log_service.daily_view(user_id, date, timezone)
    return daily_meals_response(view)


@router.patch("/{meal_id}")
async def update_meal(
    meal_id: UUID,
    body: MealUpdateRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> MealData:
    container: AppContainer = request.app.state.container
    changes = MealChanges(**body.model_dump(exclude_none=True))
    meal = container.meal_log_service.update_meal(user_id, meal_id, changes)
    return meal_data(meal)


@router.delete("/{meal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_meal(
    meal_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> None:
    container: AppContainer = request.app.state.container
    container.meal_log_service.delete_meal(user_id, meal_id)
