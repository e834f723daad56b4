"""Period statistics endpoint."""

import datetime as dt
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request

from meal_analytics.api.dependencies import current_user_id
from meal_analytics.api.models import PeriodStatsResponse, period_stats_response
from meal_analytics.containers import AppContainer
from meal_analytics.domain.errors import InvalidRange
from meal_analytics.domain.stats import PeriodKind

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("/period-stats")
async def period_stats(
    request: Request,
    period: PeriodKind = Query(default=PeriodKind.WEEKLY),
    start_date: dt.date | None = Query(default=None),
    end_date: dt.date | None = Query(default=None),
    timezone: str = Query(default="UTC"),
    user_id: UUID = Depends(current_user_id),
) -> PeriodStatsResponse:
    """Return daily totals and averages.

    Without dates the current calendar period in the caller's timezone is used.
    """
    container: AppContainer = request.app.state.container
    if start_date is None and end_date is None:
        stats = container.stats_service.get_period(user_id, period, timezone)
    elif start_date is None or end_date is None:
        raise InvalidRange("start_date and end_date must be given together")
    else:
        stats = container.stats_service.aggregate(
            user_id, period, start_date, end_date
        )
    return period_stats_response(stats)
