"""Supabase repository for generated reports."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from meal_analytics.adapters.supabase_errors import execute
from meal_analytics.domain.errors import StoreUnavailable
from meal_analytics.domain.reports import (
    Report,
    ReportType,
    summary_from_dict,
    summary_to_dict,
)
from meal_analytics.services.reports import ReportRepository

_COLUMNS = (
    "id, user_id, report_type, start_date, end_date, summary, ai_insights, "
    "recommendations, created_at"
)


@dataclass
class SupabaseReportRepository(ReportRepository):
    """Supabase implementation for report snapshots."""

    client: Client

    def create_report(self, report: Report) -> UUID:
        """Insert the report snapshot in a single write."""
        response = execute(
            self.client.table("meal_reports").insert(
                {
                    "user_id": str(report.user_id),
                    "report_type": report.report_type.value,
                    "start_date": report.start_date.isoformat(),
                    "end_date": report.end_date.isoformat(),
                    "summary": summary_to_dict(report.summary),
                    "ai_insights": report.ai_insights,
                    "recommendations": report.recommendations,
                    "created_at": report.created_at.isoformat(),
                }
            ),
            "report insert",
        )
        if not response.data:
            raise StoreUnavailable("Failed to create report")
        return UUID(str(response.data[0]["id"]))

    def list_reports(self, user_id: UUID, limit: int, skip: int) -> list[Report]:
        """Return a page of the user's reports, newest first."""
        if limit <= 0:
            return []
        response = execute(
            self.client.table("meal_reports")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("created_at", desc=True)
            .range(skip, skip + limit - 1),
            "report read",
        )
        return [_parse_report(row) for row in response.data or []]

    def get_report(self, report_id: UUID) -> Report | None:
        """Return a report by id."""
        response = execute(
            self.client.table("meal_reports")
            .select(_COLUMNS)
            .eq("id", str(report_id))
            .limit(1),
            "report read",
        )
        if not response.data:
            return None
        return _parse_report(response.data[0])

    def delete_report(self, report_id: UUID) -> bool:
        """Delete a report row."""
        response = execute(
            self.client.table("meal_reports").delete().eq("id", str(report_id)),
            "report delete",
        )
        return bool(response.data)


def _parse_report(row: dict[str, object]) -> Report:
    summary_raw = row.get("summary")
    recommendations_raw = row.get("recommendations")
    ai_insights = row.get("ai_insights")
    return Report(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        report_type=ReportType(str(row["report_type"])),
        start_date=date.fromisoformat(str(row["start_date"])[:10]),
        end_date=date.fromisoformat(str(row["end_date"])[:10]),
        summary=summary_from_dict(summary_raw if isinstance(summary_raw, dict) else {}),
        ai_insights=str(ai_insights) if ai_insights is not None else None,
        recommendations=(
            [str(item) for item in recommendations_raw]
            if isinstance(recommendations_raw, list)
            else []
        ),
        created_at=datetime.fromisoformat(str(row["created_at"])),
    )
