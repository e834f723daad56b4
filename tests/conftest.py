"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from uuid import UUID, uuid4

import pytest

from meal_analytics.config import Settings
from meal_analytics.containers import AppContainer
from meal_analytics.domain.meals import MealDraft, MealEntry, MealType
from meal_analytics.domain.models import UserContact
from meal_analytics.domain.profile import (
    ActivityLevel,
    Goal,
    HealthProfile,
    ProfileAdvice,
    Sex,
)
from meal_analytics.domain.reports import Report
from meal_analytics.services.meals import MealLogRepository, MealLogService
from meal_analytics.services.narrative import NarrativeClient, NarrativeService
from meal_analytics.services.profiles import ProfileRepository, ProfileService
from meal_analytics.services.reports import (
    ReportConfig,
    ReportNotifier,
    ReportRepository,
    ReportService,
)
from meal_analytics.services.stats import StatsService
from meal_analytics.services.users import UserDirectory


def make_meal(  # noqa: PLR0913
    user_id: UUID,
    day: date,
    calories: float,
    protein_g: float = 0.0,
    carbs_g: float = 0.0,
    fat_g: float = 0.0,
    fiber_g: float = 0.0,
    meal_type: MealType = MealType.LUNCH,
) -> MealEntry:
    return MealEntry(
        id=uuid4(),
        user_id=user_id,
        meal_type=meal_type,
        date=day,
        food_name="test meal",
        calories=calories,
        protein_g=protein_g,
        carbs_g=carbs_g,
        fat_g=fat_g,
        fiber_g=fiber_g,
        notes=None,
        created_at=datetime(day.year, day.month, day.day, 12, 0),
    )


def reference_profile() -> HealthProfile:
    """Male, 30 years, 70 kg, 175 cm, moderately active, losing weight."""
    return HealthProfile(
        age=30,
        weight_kg=70.0,
        height_cm=175.0,
        sex=Sex.MALE,
        activity_level=ActivityLevel.MODERATE,
        goal=Goal.LOSE,
    )


@dataclass
class InMemoryMealLogRepository(MealLogRepository):
    """In-memory meal log repository for tests."""

    meals: dict[UUID, MealEntry] = field(default_factory=dict)

    def add(self, *meals: MealEntry) -> None:
        for meal in meals:
            self.meals[meal.id] = meal

    def list_meals(self, user_id: UUID, start: date, end: date) -> list[MealEntry]:
        return sorted(
            (
                meal
                for meal in self.meals.values()
                if meal.user_id == user_id and start <= meal.date <= end
            ),
            key=lambda meal: (meal.date, meal.created_at),
        )

    def create_meal(
        self, user_id: UUID, draft: MealDraft, day: date, created_at: datetime
    ) -> MealEntry:
        meal = MealEntry(
            id=uuid4(),
            user_id=user_id,
            meal_type=draft.meal_type,
            date=day,
            food_name=draft.food_name,
            calories=draft.calories,
            protein_g=draft.protein_g,
            carbs_g=draft.carbs_g,
            fat_g=draft.fat_g,
            fiber_g=draft.fiber_g,
            notes=draft.notes,
            created_at=created_at,
        )
        self.meals[meal.id] = meal
        return meal

    def get_meal(self, meal_id: UUID) -> MealEntry | None:
        return self.meals.get(meal_id)

    def update_meal(self, meal_id: UUID, changes: dict[str, object]) -> MealEntry:
        updated = replace(self.meals[meal_id], **changes)
        self.meals[meal_id] = updated
        return updated

    def delete_meal(self, meal_id: UUID) -> bool:
        return self.meals.pop(meal_id, None) is not None


@dataclass
class InMemoryProfileRepository(ProfileRepository):
    """In-memory profile repository for tests."""

    profiles: dict[UUID, HealthProfile] = field(default_factory=dict)
    advice: dict[UUID, ProfileAdvice | None] = field(default_factory=dict)

    def get_profile(self, user_id: UUID) -> HealthProfile | None:
        return self.profiles.get(user_id)

    def get_advice(self, user_id: UUID) -> ProfileAdvice | None:
        return self.advice.get(user_id)

    def save_profile(
        self,
        user_id: UUID,
        profile: HealthProfile,
        advice: ProfileAdvice | None = None,
    ) -> None:
        self.profiles[user_id] = profile
        self.advice[user_id] = advice


@dataclass
class InMemoryReportRepository(ReportRepository):
    """In-memory report repository for tests."""

    reports: dict[UUID, Report] = field(default_factory=dict)

    def create_report(self, report: Report) -> UUID:
        report_id = uuid4()
        self.reports[report_id] = replace(report, id=report_id)
        return report_id

    def list_reports(self, user_id: UUID, limit: int, skip: int) -> list[Report]:
        owned = sorted(
            (
                report
                for report in reversed(list(self.reports.values()))
                if report.user_id == user_id
            ),
            key=lambda report: report.created_at,
            reverse=True,
        )
        return owned[skip : skip + limit]

    def get_report(self, report_id: UUID) -> Report | None:
        return self.reports.get(report_id)

    def delete_report(self, report_id: UUID) -> bool:
        return self.reports.pop(report_id, None) is not None


@dataclass
class InMemoryUserDirectory(UserDirectory):
    """In-memory user directory for tests."""

    contacts: dict[UUID, UserContact] = field(default_factory=dict)

    def get_contact(self, user_id: UUID) -> UserContact | None:
        return self.contacts.get(user_id)


@dataclass
class FakeNarrativeClient(NarrativeClient):
    """Fake narrative client returning a fixed payload."""

    payload: dict[str, object] = field(
        default_factory=lambda: {
            "insights": "You logged consistently and kept protein close to target.",
            "recommendations": ["Add a vegetable to dinner", "Drink more water"],
        }
    )
    delay_seconds: float = 0.0
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)

    async def generate(  # noqa: PLR0913
        self,
        *,
        model: str,
        reasoning_effort: str | None,
        store: bool,
        prompt: str,
        schema: dict[str, object],
    ) -> dict[str, object]:
        self.prompts.append(prompt)
        if self.delay_seconds:
            await asyncio.sleep(self.delay_seconds)
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class FakeNotifier(ReportNotifier):
    """Fake notifier that records deliveries."""

    delivered: list[tuple[UUID, Report]] = field(default_factory=list)
    result: bool = True
    error: Exception | None = None

    async def notify(self, user_id: UUID, report: Report) -> bool:
        if self.error is not None:
            raise self.error
        self.delivered.append((user_id, report))
        return self.result


@pytest.fixture
def settings() -> Settings:
    return Settings(
        supabase_url="https://example.supabase.co",
        supabase_service_key="service-key",
        openai_api_key="openai-key",
    )


@pytest.fixture
def meal_repository() -> InMemoryMealLogRepository:
    return InMemoryMealLogRepository()


@pytest.fixture
def profile_repository() -> InMemoryProfileRepository:
    return InMemoryProfileRepository()


@pytest.fixture
def report_repository() -> InMemoryReportRepository:
    return InMemoryReportRepository()


@pytest.fixture
def narrative_client() -> FakeNarrativeClient:
    return FakeNarrativeClient()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def report_service(
    meal_repository: InMemoryMealLogRepository,
    profile_repository: InMemoryProfileRepository,
    report_repository: InMemoryReportRepository,
    narrative_client: FakeNarrativeClient,
    notifier: FakeNotifier,
) -> ReportService:
    return ReportService(
        stats_service=StatsService(meal_repository),
        profile_repository=profile_repository,
        narrative_service=NarrativeService(
            client=narrative_client,
            model="gpt-5.2",
            reasoning_effort="low",
            store=False,
        ),
        repository=report_repository,
        notifier=notifier,
        config=ReportConfig(narrative_timeout_seconds=0.5),
    )


@pytest.fixture
def container(
    settings: Settings,
    meal_repository: InMemoryMealLogRepository,
    profile_repository: InMemoryProfileRepository,
    report_service: ReportService,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        meal_log_service=MealLogService(meal_repository),
        stats_service=report_service.stats_service,
        profile_service=ProfileService(profile_repository),
        report_service=report_service,
        close_resources=close_resources,
    )
