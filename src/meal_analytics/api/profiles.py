"""Health profile endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Request

from meal_analytics.api.dependencies import current_user_id
from meal_analytics.api.models import (
    HealthProfileRequest,
    HealthProfileResponse,
    profile_response,
)
from meal_analytics.containers import AppContainer
from meal_analytics.domain.errors import NotFound
from meal_analytics.domain.profile import HealthProfile

router = APIRouter(prefix="/profile", tags=["profile"])


@router.put("")
async def save_profile(
    body: HealthProfileRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> HealthProfileResponse:
    """Store the survey answers and return the derived targets."""
    container: AppContainer = request.app.state.container
    profile = HealthProfile(
        age=body.age,
        weight_kg=body.weight_kg,
        height_cm=body.height_cm,
        sex=body.sex,
        activity_level=body.activity_level,
        goal=body.goal,
        medical_conditions=tuple(body.medical_conditions),
        allergies=tuple(body.allergies),
        dietary_preferences=tuple(body.dietary_preferences),
    )
    return profile_response(
        await container.profile_service.save_profile(user_id, profile)
    )


@router.get("")
async def get_profile(
    request: Request, user_id: UUID = Depends(current_user_id)
) -> HealthProfileResponse:
    container: AppContainer = request.app.state.container
    view = container.profile_service.get_profile(user_id)
    if view is None:
        raise NotFound("profile not found")
    return profile_response(view)
