"""Brevo transactional email adapter for report delivery."""

import asyncio
import html
from dataclasses import dataclass
from uuid import UUID

import httpx

from meal_analytics.domain.reports import Report
from meal_analytics.services.reports import ReportNotifier
from meal_analytics.services.users import UserDirectory


@dataclass
class BrevoEmailNotifier(ReportNotifier):
    """Sends report summaries through Brevo's HTTP email API."""

    api_key: str
    base_url: str
    sender_email: str
    sender_name: str
    directory: UserDirectory
    http_client: httpx.AsyncClient

    @classmethod
    def create(  # noqa: PLR0913
        cls,
        api_key: str,
        base_url: str,
        sender_email: str,
        sender_name: str,
        directory: UserDirectory,
    ) -> "BrevoEmailNotifier":
        """Create a notifier with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            sender_email=sender_email,
            sender_name=sender_name,
            directory=directory,
            http_client=httpx.AsyncClient(),
        )

    async def notify(self, user_id: UUID, report: Report) -> bool:
        """Email the report to the user; False when no address is known."""
        contact = await asyncio.to_thread(self.directory.get_contact, user_id)
        if contact is None:
            return False
        recipient: dict[str, str] = {"email": contact.email}
        if contact.name:
            recipient["name"] = contact.name
        response = await self.http_client.post(
            f"{self.base_url}/smtp/email",
            headers={"api-key": self.api_key, "accept": "application/json"},
            json={
                "sender": {"email": self.sender_email, "name": self.sender_name},
                "to": [recipient],
                "subject": _subject(report),
                "htmlContent": render_report_html(report, contact.name),
            },
            timeout=10,
        )
        response.raise_for_status()
        return True

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _subject(report: Report) -> str:
    return (
        f"Your {report.report_type.value} nutrition report "
        f"({report.start_date.isoformat()} to {report.end_date.isoformat()})"
    )


def render_report_html(report: Report, name: str | None) -> str:
    """Render a report summary as a simple HTML email body."""
    summary = report.summary
    rows = [
        ("Days logged", f"{summary.days_logged} of {summary.total_days}"),
        ("Total meals", str(summary.total_meals)),
        ("Average calories", f"{summary.avg_calories} kcal"),
        ("Average protein", f"{summary.avg_protein_g:.1f} g"),
        ("Average carbs", f"{summary.avg_carbs_g:.1f} g"),
        ("Average fat", f"{summary.avg_fat_g:.1f} g"),
        ("Longest streak", f"{summary.streak_days} days"),
    ]
    if summary.target_calories is not None:
        rows.append(("Calorie target", f"{summary.target_calories} kcal"))
    table = "".join(
        f"<tr><td>{html.escape(label)}</td><td>{html.escape(value)}</td></tr>"
        for label, value in rows
    )
    parts = [
        "<html><body style=\"font-family: Arial, sans-serif; padding: 20px;\">",
        f"<p>Hello {html.escape(name or 'there')},</p>",
        f"<p>{html.escape(_subject(report))}</p>",
        f"<table>{table}</table>",
    ]
    if report.ai_insights:
        parts.append(f"<h3>Insights</h3><p>{html.escape(report.ai_insights)}</p>")
    if report.recommendations:
        items = "".join(
            f"<li>{html.escape(item)}</li>" for item in report.recommendations
        )
        parts.append(f"<h3>Recommendations</h3><ul>{items}</ul>")
    parts.append("</body></html>")
    return "".join(parts)
