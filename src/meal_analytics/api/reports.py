"""Report API endpoints."""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status

from meal_analytics.api.dependencies import current_user_id
from meal_analytics.api.models import (
    GenerateReportRequest,
    GenerateReportResponse,
    ReportData,
    ReportsListResponse,
    generate_report_response,
    report_data,
)
from meal_analytics.containers import AppContainer

router = APIRouter(prefix="/reports", tags=["reports"])


@router.post("/generate")
async def generate_report(
    body: GenerateReportRequest,
    request: Request,
    user_id: UUID = Depends(current_user_id),
) -> GenerateReportResponse:
    """Generate and store a report; AI insights are optional."""
    container: AppContainer = request.app.state.container
    outcome = await container.report_service.generate(
        user_id=user_id,
        report_type=body.report_type,
        start=body.start_date,
        end=body.end_date,
        send_email=body.send_email,
    )
    return generate_report_response(outcome)


@router.get("")
async def list_reports(
    request: Request,
    user_id: UUID = Depends(current_user_id),
    limit: int = Query(default=50, ge=1, le=200),
    skip: int = Query(default=0, ge=0),
) -> ReportsListResponse:
    """Return the caller's reports, newest first."""
    container: AppContainer = request.app.state.container
    reports = container.report_service.list_reports(user_id, limit=limit, skip=skip)
    return ReportsListResponse(
        reports=[report_data(report) for report in reports], count=len(reports)
    )


@router.get("/{report_id}")
async def get_report(
    report_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> ReportData:
    """Return a stored report."""
    container: AppContainer = request.app.state.container
    return report_data(container.report_service.get_report(user_id, report_id))


@router.delete("/{report_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_report(
    report_id: UUID, request: Request, user_id: UUID = Depends(current_user_id)
) -> None:
    """Delete a stored report."""
    container: AppContainer = request.app.state.container
    container.report_service.delete_report(user_id, report_id)
