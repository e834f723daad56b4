"""Tests for report generation."""

import asyncio
from datetime import date, timedelta
from uuid import UUID, uuid4

import pytest

from meal_analytics.domain.errors import InvalidRange, ReportNotFound, StoreUnavailable
from meal_analytics.domain.reports import Report, ReportType
from meal_analytics.services.reports import ReportService, longest_streak
from tests.conftest import (
    FakeNarrativeClient,
    FakeNotifier,
    InMemoryMealLogRepository,
    InMemoryProfileRepository,
    InMemoryReportRepository,
    make_meal,
    reference_profile,
)

START = date(2024, 1, 1)


def _log_on_target_days(
    repo: InMemoryMealLogRepository, user_id: UUID, days: int
) -> None:
    for offset in range(days):
        repo.add(
            make_meal(
                user_id,
                START + timedelta(days=offset),
                2044,
                protein_g=112,
                carbs_g=246,
                fat_g=68,
            )
        )


def test_generate_report_with_narrative(
    report_service: ReportService,
    meal_repository: InMemoryMealLogRepository,
    profile_repository: InMemoryProfileRepository,
    report_repository: InMemoryReportRepository,
    narrative_client: FakeNarrativeClient,
) -> None:
    user_id = uuid4()
    profile_repository.profiles[user_id] = reference_profile()
    _log_on_target_days(meal_repository, user_id, 2)

    outcome = asyncio.run(
        report_service.generate(
            user_id, ReportType.DAILY, START, START + timedelta(days=1)
        )
    )

    report = outcome.report
    assert outcome.ai_generation_succeeded is True
    assert outcome.notification_sent is None
    assert report.id in report_repository.reports
    assert report.ai_insights
    assert report.recommendations == ["Add a vegetable to dinner", "Drink more water"]
    summary = report.summary
    assert summary.target_calories == 2044
    assert summary.compliance is not None
    assert summary.compliance.calories == 100.0
    assert summary.compliance.protein == 100.0
    assert summary.days_on_target == 2
    assert summary.best_day == START
    assert summary.streak_days == 2
    assert summary.goal_achieved is True
    assert "2044 kcal" in narrative_client.prompts[0]


def test_generate_report_caps_compliance(
    report_service: ReportService,
    meal_repository: InMemoryMealLogRepository,
    profile_repository: InMemoryProfileRepository,
) -> None:
    user_id = uuid4()
    profile_repository.profiles[user_id] = reference_profile()
    meal_repository.add(
        make_meal(user_id, START, 5000, protein_g=300, carbs_g=600, fat_g=200)
    )

    outcome = asyncio.run(
        report_service.generate(user_id, ReportType.DAILY, START, START)
    )

    compliance = outcome.report.summary.compliance
    assert compliance is not None
    assert compliance.calories == 100.0
    assert compliance.fat == 100.0
    assert outcome.report.summary.days_on_target == 0


def test_generate_report_without_profile_has_no_targets(
    report_service: ReportService,
    meal_repository: InMemoryMealLogRepository,
    narrative_client: FakeNarrativeClient,
) -> None:
    user_id = uuid4()
    _log_on_target_days(meal_repository, user_id, 3)

    outcome = asyncio.run(
        report_service.generate(
            user_id, ReportType.WEEKLY, START, START + timedelta(days=6)
        )
    )

    summary = outcome.report.summary
    assert summary.target_calories is None
    assert summary.compliance is None
    assert summary.goal_achieved is None
    assert summary.days_logged == 3
    assert summary.total_days == 7
    assert summary.adherence_ratio == round(3 / 7, 4)
    assert "Daily targets" not in narrative_client.prompts[0]


def test_generate_report_degrades_on_timeout(
    report_service: ReportService,
    meal_repository: InMemoryMealLogRepository,
    report_repository: InMemoryReportRepository,
    narrative_client: FakeNarrativeClient,
) -> None:
    user_id = uuid4()
    _log_on_target_days(meal_repository, user_id, 1)
    narrative_client.delay_seconds = 5

    outcome = asyncio.run(
        report_service.generate(user_id, ReportType.DAILY, START, START)
    )

    assert outcome.ai_generation_succeeded is False
    assert outcome.report.ai_insights is None
    assert outcome.report.recommendations == []
    assert outcome.report.summary.total_meals == 1
    assert outcome.report.id in report_repository.reports


@pytest.mark.parametrize(
    "narrative_client",
    [
        FakeNarrativeClient(error=RuntimeError("model unavailable")),
        FakeNarrativeClient(payload={"insights": ""}),
        FakeNarrativeClient(payload={"insights": "  \n\t "}),
        FakeNarrativeClient(payload={"unexpected": True}),
    ],
)
def test_generate_report_degrades_on_generation_error(
    report_service: ReportService,
    meal_repository: InMemoryMealLogRepository,
    narrative_client: FakeNarrativeClient,
) -> None:
    user_id = uuid4()
    _log_on_target_days(meal_repository, user_id, 1)

    outcome = asyncio.run(
        report_service.generate(user_id, ReportType.DAILY, START, START)
    )

    assert outcome.ai_generation_succeeded is False
    assert outcome.report.ai_insights is None
    assert outcome.report.summary.avg_calories == 2044


def test_generate_report_rejects_invalid_range(
    report_service: ReportService, report_repository: InMemoryReportRepository
) -> None:
    with pytest.raises(InvalidRange):
        asyncio.run(
            report_service.generate(
                uuid4(), ReportType.WEEKLY, START, START - timedelta(days=1)
            )
        )

    assert report_repository.reports == {}


def test_get_report_returns_stored_snapshot(
    report_service: ReportService, meal_repository: InMemoryMealLogRepository
) -> None:
    user_id = uuid4()
    _log_on_target_days(meal_repository, user_id, 2)
    outcome = asyncio.run(
        report_service.generate(
            user_id, ReportType.WEEKLY, START, START + timedelta(days=6)
        )
    )
    assert outcome.report.id is not None

    meal_repository.add(make_meal(user_id, START + timedelta(days=3), 900))
    fetched = report_service.get_report(user_id, outcome.report.id)

    assert fetched == outcome.report
    assert fetched.summary.total_meals == 2


def test_get_report_hides_other_users_reports(
    report_service: ReportService, meal_repository: InMemoryMealLogRepository
) -> None:
    user_id = uuid4()
    outcome = asyncio.run(
        report_service.generate(user_id, ReportType.DAILY, START, START)
    )
    assert outcome.report.id is not None

    with pytest.raises(ReportNotFound):
        report_service.get_report(uuid4(), outcome.report.id)
    with pytest.raises(ReportNotFound):
        report_service.get_report(user_id, uuid4())


def test_delete_report_keeps_meals(
    report_service: ReportService,
    meal_repository: InMemoryMealLogRepository,
    report_repository: InMemoryReportRepository,
) -> None:
    user_id = uuid4()
    _log_on_target_days(meal_repository, user_id, 2)
    outcome = asyncio.run(
        report_service.generate(
            user_id, ReportType.DAILY, START, START + timedelta(days=1)
        )
    )
    assert outcome.report.id is not None

    report_service.delete_report(user_id, outcome.report.id)

    assert report_repository.reports == {}
    assert len(meal_repository.meals) == 2
    with pytest.raises(ReportNotFound):
        report_service.delete_report(user_id, outcome.report.id)


def test_list_reports_newest_first(
    report_service: ReportService, meal_repository: InMemoryMealLogRepository
) -> None:
    user_id = uuid4()
    first = asyncio.run(
        report_service.generate(user_id, ReportType.DAILY, START, START)
    )
    next_day = START + timedelta(days=1)
    second = asyncio.run(
        report_service.generate(user_id, ReportType.DAILY, next_day, next_day)
    )

    reports = report_service.list_reports(user_id)

    assert [report.id for report in reports] == [second.report.id, first.report.id]
    assert report_service.list_reports(user_id, limit=1, skip=1)[0].id == (
        first.report.id
    )
    assert report_service.list_reports(uuid4()) == []


def test_generate_report_sends_email(
    report_service: ReportService, notifier: FakeNotifier
) -> None:
    user_id = uuid4()

    outcome = asyncio.run(
        report_service.generate(
            user_id, ReportType.DAILY, START, START, send_email=True
        )
    )

    assert outcome.notification_sent is True
    assert notifier.delivered[0][0] == user_id
    assert notifier.delivered[0][1].id == outcome.report.id


def test_generate_report_survives_email_failure(
    report_service: ReportService,
    notifier: FakeNotifier,
    report_repository: InMemoryReportRepository,
) -> None:
    notifier.error = RuntimeError("smtp down")

    outcome = asyncio.run(
        report_service.generate(uuid4(), ReportType.DAILY, START, START, True)
    )

    assert outcome.notification_sent is False
    assert outcome.report.id in report_repository.reports


def test_generate_report_without_notifier(
    report_service: ReportService,
) -> None:
    report_service.notifier = None

    outcome = asyncio.run(
        report_service.generate(uuid4(), ReportType.DAILY, START, START, True)
    )

    assert outcome.notification_sent is False


def test_longest_streak() -> None:
    days = [START, START + timedelta(days=1), START + timedelta(days=2)]
    days += [START + timedelta(days=5), START + timedelta(days=6)]

    assert longest_streak(days) == 3
    assert longest_streak([]) == 0
    assert longest_streak([START, START]) == 1


class FailingReportRepository(InMemoryReportRepository):
    def create_report(self, report: Report) -> UUID:
        raise StoreUnavailable("report write failed")


def test_generate_report_propagates_store_failure(
    report_service: ReportService, notifier: FakeNotifier
) -> None:
    report_service.repository = FailingReportRepository()

    with pytest.raises(StoreUnavailable):
        asyncio.run(
            report_service.generate(
                uuid4(), ReportType.DAILY, START, START, send_email=True
            )
        )

    assert notifier.delivered == []
