"""Report generation service."""

import asyncio
import logging
from dataclasses import dataclass, field, replace
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from meal_analytics.domain.errors import (
    GenerationError,
    GenerationTimeout,
    ReportNotFound,
)
from meal_analytics.domain.profile import Targets
from meal_analytics.domain.reports import (
    Compliance,
    NarrativeResult,
    Report,
    ReportOutcome,
    ReportSummary,
    ReportType,
)
from meal_analytics.domain.stats import DailyTotals, PeriodKind, PeriodStats
from meal_analytics.services.narrative import NarrativeContext, NarrativeService
from meal_analytics.services.profiles import ProfileRepository
from meal_analytics.services.stats import StatsService
from meal_analytics.services.targets import (
    DEFAULT_TARGET_CONFIG,
    TargetConfig,
    calculate_targets,
)

MAX_COMPLIANCE_PERCENT = 100.0

_logger = logging.getLogger(__name__)


class ReportRepository(Protocol):
    """Persistence interface for reports."""

    def create_report(self, report: Report) -> UUID:
        """Insert a report and return its id."""

    def list_reports(self, user_id: UUID, limit: int, skip: int) -> list[Report]:
        """Return a user's reports, newest first."""

    def get_report(self, report_id: UUID) -> Report | None:
        """Return a report by id."""

    def delete_report(self, report_id: UUID) -> bool:
        """Delete a report; return False when nothing was deleted."""


class ReportNotifier(Protocol):
    """Best-effort delivery of a generated report."""

    async def notify(self, user_id: UUID, report: Report) -> bool:
        """Deliver the report summary; return True when delivered."""


@dataclass(frozen=True)
class ReportConfig:
    """Tunables for report generation."""

    narrative_timeout_seconds: float = 10.0
    calorie_tolerance: float = 0.10
    goal_compliance_percent: float = 80.0
    goal_adherence_ratio: float = 0.7


@dataclass
class ReportService:
    """Service that combines statistics, targets and narrative into reports."""

    stats_service: StatsService
    profile_repository: ProfileRepository
    narrative_service: NarrativeService
    repository: ReportRepository
    notifier: ReportNotifier | None = None
    config: ReportConfig = field(default_factory=ReportConfig)
    target_config: TargetConfig = field(default=DEFAULT_TARGET_CONFIG)

    async def generate(
        self,
        user_id: UUID,
        report_type: ReportType,
        start: date,
        end: date,
        send_email: bool = False,
    ) -> ReportOutcome:
        """Build, persist and optionally deliver a report for the range."""
        profile, stats = await asyncio.gather(
            asyncio.to_thread(self.profile_repository.get_profile, user_id),
            asyncio.to_thread(
                self.stats_service.aggregate,
                user_id,
                PeriodKind(report_type.value),
                start,
                end,
            ),
        )
        targets = (
            calculate_targets(profile, self.target_config)
            if profile is not None
            else None
        )
        summary = build_summary(stats, targets, self.config)

        result = await self._narrate(
            NarrativeContext(
                report_type=report_type,
                start_date=start,
                end_date=end,
                summary=summary,
                targets=targets,
            )
        )
        narrative = result.narrative
        report = Report(
            id=None,
            user_id=user_id,
            report_type=report_type,
            start_date=start,
            end_date=end,
            summary=summary,
            ai_insights=narrative.text if narrative else None,
            recommendations=list(narrative.recommendations) if narrative else [],
            created_at=datetime.now(tz=UTC),
        )
        report_id = await asyncio.to_thread(self.repository.create_report, report)
        report = replace(report, id=report_id)
        _logger.info(
            "Report generated",
            extra={
                "report_id": str(report_id),
                "ai_generation_succeeded": result.succeeded,
            },
        )

        notification_sent = None
        if send_email:
            notification_sent = await self._notify(user_id, report)

        return ReportOutcome(
            report=report,
            ai_generation_succeeded=result.succeeded,
            notification_sent=notification_sent,
        )

    def list_reports(
        self, user_id: UUID, limit: int = 50, skip: int = 0
    ) -> list[Report]:
        """Return the user's reports, newest first."""
        return self.repository.list_reports(user_id, limit, skip)

    def get_report(self, user_id: UUID, report_id: UUID) -> Report:
        """Return a stored report exactly as it was generated."""
        report = self.repository.get_report(report_id)
        if report is None or report.user_id != user_id:
            raise ReportNotFound(f"report {report_id} not found")
        return report

    def delete_report(self, user_id: UUID, report_id: UUID) -> None:
        """Delete a report owned by the user."""
        self.get_report(user_id, report_id)
        if not self.repository.delete_report(report_id):
            raise ReportNotFound(f"report {report_id} not found")

    async def _narrate(self, context: NarrativeContext) -> NarrativeResult:
        try:
            narrative = await self.narrative_service.generate(
                context, self.config.narrative_timeout_seconds
            )
        except GenerationTimeout as exc:
            _logger.warning("Narrative generation timed out: %s", exc)
            return NarrativeResult.unavailable("timeout")
        except GenerationError as exc:
            _logger.warning("Narrative generation failed: %s", exc)
            return NarrativeResult.unavailable("error")
        return NarrativeResult.of(narrative)

    async def _notify(self, user_id: UUID, report: Report) -> bool:
        if self.notifier is None:
            _logger.warning("Report delivery requested but no notifier is configured")
            return False
        try:
            delivered = await self.notifier.notify(user_id, report)
        except Exception:
            _logger.exception(
                "Failed to deliver report", extra={"report_id": str(report.id)}
            )
            return False
        if not delivered:
            _logger.warning(
                "Report delivery was not accepted",
                extra={"report_id": str(report.id)},
            )
        return delivered


def build_summary(
    stats: PeriodStats, targets: Targets | None, config: ReportConfig
) -> ReportSummary:
    """Combine period statistics with target comparisons."""
    period = stats.summary
    logged_days = [day for day in stats.daily if day.meal_count > 0]
    summary = ReportSummary(
        total_meals=period.total_meals,
        avg_calories=period.avg_calories,
        avg_protein_g=period.avg_protein_g,
        avg_carbs_g=period.avg_carbs_g,
        avg_fat_g=period.avg_fat_g,
        avg_fiber_g=period.avg_fiber_g,
        total_days=period.total_days,
        days_logged=period.days_logged,
        adherence_ratio=round(period.adherence_ratio, 4),
        streak_days=longest_streak([day.day for day in logged_days]),
    )
    if targets is None:
        return summary

    compliance = Compliance(
        calories=_percent_of(period.avg_calories, targets.daily_calories),
        protein=_percent_of(period.avg_protein_g, targets.protein_g),
        carbs=_percent_of(period.avg_carbs_g, targets.carbs_g),
        fat=_percent_of(period.avg_fat_g, targets.fat_g),
    )
    days_on_target = sum(
        1
        for day in logged_days
        if _within_tolerance(day.calories, targets.daily_calories, config)
    )
    goal_achieved = (
        compliance.average >= config.goal_compliance_percent
        and period.adherence_ratio >= config.goal_adherence_ratio
    )
    return replace(
        summary,
        target_calories=targets.daily_calories,
        compliance=_rounded(compliance),
        days_on_target=days_on_target,
        best_day=_best_day(logged_days, targets),
        goal_achieved=goal_achieved,
    )


def longest_streak(days: list[date]) -> int:
    """Length of the longest run of consecutive calendar days."""
    longest = 0
    current = 0
    previous: date | None = None
    for day in sorted(set(days)):
        if previous is not None and day - previous == timedelta(days=1):
            current += 1
        else:
            current = 1
        longest = max(longest, current)
        previous = day
    return longest


def _best_day(logged_days: list[DailyTotals], targets: Targets) -> date | None:
    best: date | None = None
    best_score = 0.0
    for day in logged_days:
        score = Compliance(
            calories=_percent_of(day.calories, targets.daily_calories),
            protein=_percent_of(day.protein_g, targets.protein_g),
            carbs=_percent_of(day.carbs_g, targets.carbs_g),
            fat=_percent_of(day.fat_g, targets.fat_g),
        ).average
        if score > best_score:
            best_score = score
            best = day.day
    return best


def _within_tolerance(calories: float, target: int, config: ReportConfig) -> bool:
    if target <= 0:
        return False
    return abs(calories - target) / target <= config.calorie_tolerance


def _percent_of(value: float, target: float) -> float:
    if target <= 0:
        return 0.0
    return min(value / target * 100, MAX_COMPLIANCE_PERCENT)


def _rounded(compliance: Compliance) -> Compliance:
    return Compliance(
        calories=round(compliance.calories, 1),
        protein=round(compliance.protein, 1),
        carbs=round(compliance.carbs, 1),
        fat=round(compliance.fat, 1),
    )
