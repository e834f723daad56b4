"""Domain models for generated reports."""

from dataclasses import asdict, dataclass, field
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID


class ReportType(StrEnum):
    """Kind of report a user can request."""

    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class Compliance:
    """Average intake as a percentage of target, capped at 100."""

    calories: float
    protein: float
    carbs: float
    fat: float

    @property
    def average(self) -> float:
        return (self.calories + self.protein + self.carbs + self.fat) / 4


@dataclass(frozen=True)
class ReportSummary:
    """Statistics snapshot stored with a report."""

    total_meals: int
    avg_calories: int
    avg_protein_g: float
    avg_carbs_g: float
    avg_fat_g: float
    avg_fiber_g: float
    total_days: int
    days_logged: int
    adherence_ratio: float
    streak_days: int
    target_calories: int | None = None
    compliance: Compliance | None = None
    days_on_target: int | None = None
    best_day: date | None = None
    goal_achieved: bool | None = None


@dataclass(frozen=True)
class Report:
    """A persisted nutrition report."""

    id: UUID | None
    user_id: UUID
    report_type: ReportType
    start_date: date
    end_date: date
    summary: ReportSummary
    ai_insights: str | None
    recommendations: list[str]
    created_at: datetime


@dataclass(frozen=True)
class Narrative:
    """Generated insights text with recommendations."""

    text: str
    recommendations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class NarrativeResult:
    """Either a narrative or a marker that generation was unavailable."""

    narrative: Narrative | None
    failure_reason: str | None = None

    @classmethod
    def of(cls, narrative: Narrative) -> "NarrativeResult":
        return cls(narrative=narrative)

    @classmethod
    def unavailable(cls, reason: str) -> "NarrativeResult":
        return cls(narrative=None, failure_reason=reason)

    @property
    def succeeded(self) -> bool:
        return self.narrative is not None


@dataclass(frozen=True)
class ReportOutcome:
    """Result of report generation."""

    report: Report
    ai_generation_succeeded: bool
    notification_sent: bool | None = None


def summary_to_dict(summary: ReportSummary) -> dict[str, object]:
    """Serialize a report summary to JSON-compatible values."""
    payload = asdict(summary)
    payload["best_day"] = summary.best_day.isoformat() if summary.best_day else None
    return payload


def summary_from_dict(raw: dict[str, object]) -> ReportSummary:
    """Parse a report summary stored by summary_to_dict."""
    compliance_raw = raw.get("compliance")
    compliance = (
        Compliance(
            calories=float(compliance_raw["calories"]),
            protein=float(compliance_raw["protein"]),
            carbs=float(compliance_raw["carbs"]),
            fat=float(compliance_raw["fat"]),
        )
        if isinstance(compliance_raw, dict)
        else None
    )
    best_day_raw = raw.get("best_day")
    target_calories = raw.get("target_calories")
    days_on_target = raw.get("days_on_target")
    goal_achieved = raw.get("goal_achieved")
    return ReportSummary(
        total_meals=int(raw.get("total_meals", 0)),
        avg_calories=int(raw.get("avg_calories", 0)),
        avg_protein_g=float(raw.get("avg_protein_g", 0.0)),
        avg_carbs_g=float(raw.get("avg_carbs_g", 0.0)),
        avg_fat_g=float(raw.get("avg_fat_g", 0.0)),
        avg_fiber_g=float(raw.get("avg_fiber_g", 0.0)),
        total_days=int(raw.get("total_days", 0)),
        days_logged=int(raw.get("days_logged", 0)),
        adherence_ratio=float(raw.get("adherence_ratio", 0.0)),
        streak_days=int(raw.get("streak_days", 0)),
        target_calories=int(target_calories) if target_calories is not None else None,
        compliance=compliance,
        days_on_target=int(days_on_target) if days_on_target is not None else None,
        best_day=(
            date.fromisoformat(best_day_raw)
            if isinstance(best_day_raw, str) and best_day_raw
            else None
        ),
        goal_achieved=bool(goal_achieved) if goal_achieved is not None else None,
    )
