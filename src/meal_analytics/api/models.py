"""Pydantic models for the analytics HTTP API."""

import datetime as dt
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from meal_analytics.domain.meals import MealEntry, MealType
from meal_analytics.domain.profile import ActivityLevel, Goal, ProfileAdvice, Sex
from meal_analytics.domain.reports import (
    Report,
    ReportOutcome,
    ReportType,
    summary_to_dict,
)
from meal_analytics.domain.stats import DailyTotals, PeriodKind, PeriodStats
from meal_analytics.services.meals import DailyMeals
from meal_analytics.services.profiles import ProfileView


class DailyData(BaseModel):
    """Totals for one calendar day."""

    date: dt.date
    meal_count: int
    calories: float
    protein: float
    carbs: float
    fat: float
    fiber: float


class PeriodSummaryData(BaseModel):
    """Averages over every day of the period."""

    total_meals: int
    avg_calories: int
    avg_protein: float
    avg_carbs: float
    avg_fat: float
    avg_fiber: float
    total_days: int
    days_logged: int


class PeriodStatsResponse(BaseModel):
    period: PeriodKind
    start_date: dt.date
    end_date: dt.date
    daily_data: list[DailyData]
    summary: PeriodSummaryData


class GenerateReportRequest(BaseModel):
    """Body of a report generation request."""

    report_type: ReportType
    start_date: dt.date
    end_date: dt.date
    send_email: bool = False


class ReportData(BaseModel):
    id: UUID | None
    report_type: ReportType
    start_date: dt.date
    end_date: dt.date
    summary: dict[str, Any]
    ai_insights: str | None
    recommendations: list[str]
    created_at: dt.datetime


class GenerateReportResponse(BaseModel):
    report: ReportData
    ai_generation_succeeded: bool
    notification_sent: bool | None
    message: str


class ReportsListResponse(BaseModel):
    reports: list[ReportData]
    count: int


class HealthProfileRequest(BaseModel):
    """Health survey answers."""

    model_config = ConfigDict(allow_inf_nan=False)

    age: int = Field(ge=0)
    weight_kg: float = Field(gt=0)
    height_cm: float = Field(gt=0)
    sex: Sex
    activity_level: ActivityLevel
    goal: Goal
    medical_conditions: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)
    dietary_preferences: list[str] = Field(default_factory=list)


class TargetsData(BaseModel):
    bmi: float
    bmi_category: str
    bmr: float
    tdee: float
    daily_calories: int
    protein_g: int
    carbs_g: int
    fat_g: int


class ProfileAdviceData(BaseModel):
    ai_recommendations: str
    recommended_foods: list[str]
    foods_to_avoid: list[str]


class HealthProfileResponse(BaseModel):
    profile: HealthProfileRequest
    targets: TargetsData
    advice: ProfileAdviceData | None


class MealCreateRequest(BaseModel):
    """A meal to log; the date defaults to today in the caller's timezone."""

    model_config = ConfigDict(allow_inf_nan=False)

    meal_type: MealType
    food_name: str = Field(min_length=1)
    calories: float = Field(ge=0)
    protein_g: float = Field(ge=0)
    carbs_g: float = Field(ge=0)
    fat_g: float = Field(ge=0)
    fiber_g: float = Field(default=0.0, ge=0)
    notes: str | None = None
    date: dt.date | None = None


class MealUpdateRequest(BaseModel):
    """Editable meal fields. The date is fixed once a meal is logged."""

    model_config = ConfigDict(extra="forbid", allow_inf_nan=False)

    meal_type: MealType | None = None
    food_name: str | None = Field(default=None, min_length=1)
    calories: float | None = Field(default=None, ge=0)
    protein_g: float | None = Field(default=None, ge=0)
    carbs_g: float | None = Field(default=None, ge=0)
    fat_g: float | None = Field(default=None, ge=0)
    fiber_g: float | None = Field(default=None, ge=0)
    notes: str | None = None


class MealData(BaseModel):
    id: UUID
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


class DailyMealsResponse(BaseModel):
    date: dt.date
    meals: list[MealData]
    daily_totals: DailyData


def daily_data(totals: DailyTotals) -> DailyData:
    return DailyData(
        date=totals.day,
        meal_count=totals.meal_count,
        calories=totals.calories,
        protein=totals.protein_g,
        carbs=totals.carbs_g,
        fat=totals.fat_g,
        fiber=totals.fiber_g,
    )


def period_stats_response(stats: PeriodStats) -> PeriodStatsResponse:
    """Map period statistics to the HTTP payload."""
    summary = stats.summary
    return PeriodStatsResponse(
        period=stats.period,
        start_date=stats.start_date,
        end_date=stats.end_date,
        daily_data=[daily_data(day) for day in stats.daily],
        summary=PeriodSummaryData(
            total_meals=summary.total_meals,
            avg_calories=summary.avg_calories,
            avg_protein=summary.avg_protein_g,
            avg_carbs=summary.avg_carbs_g,
            avg_fat=summary.avg_fat_g,
            avg_fiber=summary.avg_fiber_g,
            total_days=summary.total_days,
            days_logged=summary.days_logged,
        ),
    )


def report_data(report: Report) -> ReportData:
    """Map a stored report to the HTTP payload."""
    return ReportData(
        id=report.id,
        report_type=report.report_type,
        start_date=report.start_date,
        end_date=report.end_date,
        summary=summary_to_dict(report.summary),
        ai_insights=report.ai_insights,
        recommendations=report.recommendations,
        created_at=report.created_at,
    )


def generate_report_response(outcome: ReportOutcome) -> GenerateReportResponse:
    """Map a generation outcome to the HTTP payload."""
    if outcome.ai_generation_succeeded:
        message = "Report generated successfully"
    else:
        message = "Report generated without AI insights"
    if outcome.notification_sent is True:
        message += " and sent to your email"
    elif outcome.notification_sent is False:
        message += "; email delivery failed"
    return GenerateReportResponse(
        report=report_data(outcome.report),
        ai_generation_succeeded=outcome.ai_generation_succeeded,
        notification_sent=outcome.notification_sent,
        message=message,
    )


def profile_response(view: ProfileView) -> HealthProfileResponse:
    """Map a profile with targets to the HTTP payload."""
    profile = view.profile
    targets = view.targets
    return HealthProfileResponse(
        profile=HealthProfileRequest(
            age=profile.age,
            weight_kg=profile.weight_kg,
            height_cm=profile.height_cm,
            sex=profile.sex,
            activity_level=profile.activity_level,
            goal=profile.goal,
            medical_conditions=list(profile.medical_conditions),
            allergies=list(profile.allergies),
            dietary_preferences=list(profile.dietary_preferences),
        ),
        targets=TargetsData(
            bmi=targets.bmi,
            bmi_category=targets.bmi_category,
            bmr=targets.bmr,
            tdee=targets.tdee,
            daily_calories=targets.daily_calories,
            protein_g=targets.protein_g,
            carbs_g=targets.carbs_g,
            fat_g=targets.fat_g,
        ),
        advice=advice_data(view.advice),
    )


def meal_data(meal: MealEntry) -> MealData:
    """Map a meal entry to the HTTP payload."""
    return MealData(
        id=meal.id,
        meal_type=meal.meal_type,
        date=meal.date,
        food_name=meal.food_name,
        calories=meal.calories,
        protein_g=meal.protein_g,
        carbs_g=meal.carbs_g,
        fat_g=meal.fat_g,
        fiber_g=meal.fiber_g,
        notes=meal.notes,
        created_at=meal.created_at,
    )


def advice_data(advice: ProfileAdvice | None) -> ProfileAdviceData | None:
    if advice is None:
        return None
    return ProfileAdviceData(
        ai_recommendations=advice.text,
        recommended_foods=advice.recommended_foods,
        foods_to_avoid=advice.foods_to_avoid,
    )


def daily_meals_response(view: DailyMeals) -> DailyMealsResponse:
    """Map one day of meals and its totals to the HTTP payload."""
    return DailyMealsResponse(
        date=view.day,
        meals=[meal_data(meal) for meal in view.meals],
        daily_totals=daily_data(view.totals),
    )
