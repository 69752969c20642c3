"""
Report endpoints - submission, retrieval, status changes and triage.
"""

from typing import List, Optional
import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Query, status

from civic_triage.core.container import ServiceContainer
from civic_triage.core.errors import ProcessingError
from civic_triage.models.base import ProcessReportResponse, SubmitReportResponse
from civic_triage.models.report import Report, ReportSubmission, StatusUpdate
from civic_triage.routes.deps import get_services
from civic_triage.services.report_pipeline import ReportPipeline

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


async def run_triage(pipeline: ReportPipeline, report_id: str, report_data: dict) -> None:
    """Background triage after submission. Failures are logged; POST /reports/{id}/process retries."""
    try:
        await pipeline.on_report_created(report_id, report_data)
    except ProcessingError as e:
        logger.error(f"❌ Triage failed for report {report_id} [{e.code}]: {e.message}")


@router.post("", status_code=status.HTTP_201_CREATED, response_model=SubmitReportResponse)
def submit_report(
    submission: ReportSubmission,
    background_tasks: BackgroundTasks,
    services: ServiceContainer = Depends(get_services),
):
    """
    Submit a new citizen report.

    The report is validated and stored with status pending; triage
    (analysis, enrichment, priority, routing, urgent alerts) runs after
    the response is sent.
    """
    logger.info(f"📝 POST /reports - category={submission.category}")
    report_data = submission.model_dump()
    result = services.reports.submit_report(report_data, submission.media_urls)

    stored = services.store.get_report(result["report_id"]) or report_data
    background_tasks.add_task(run_triage, services.pipeline, result["report_id"], stored)

    return SubmitReportResponse(report_id=result["report_id"], message="Report submitted")


@router.get("", response_model=List[Report])
def get_reports(
    user_id: Optional[str] = None,
    limit: int = Query(20, ge=1, le=100),
    services: ServiceContainer = Depends(get_services),
):
    if user_id:
        return services.reports.get_user_reports(user_id, limit)
    return services.reports.list_reports(limit)


@router.get("/nearby", response_model=List[Report])
def get_nearby_reports(
    latitude: float = Query(..., ge=-90, le=90),
    longitude: float = Query(..., ge=-180, le=180),
    radius_km: Optional[float] = Query(None, gt=0),
    services: ServiceContainer = Depends(get_services),
):
    """Reports within radius_km (default NEARBY_RADIUS_KM), nearest first."""
    radius = radius_km if radius_km is not None else services.settings.NEARBY_RADIUS_KM
    return services.reports.get_reports_by_location(latitude, longitude, radius)


@router.get("/{report_id}", response_model=Report)
def get_report(report_id: str, services: ServiceContainer = Depends(get_services)):
    return services.reports.get_report(report_id)


@router.patch("/{report_id}/status", response_model=Report)
def update_report_status(
    report_id: str,
    update: StatusUpdate,
    services: ServiceContainer = Depends(get_services),
):
    return services.reports.update_report_status(
        report_id,
        update.status.value,
        update.updated_by,
        update.comments,
    )


@router.post("/{report_id}/process", response_model=ProcessReportResponse)
async def process_report(report_id: str, services: ServiceContainer = Depends(get_services)):
    """
    Run triage for a stored report now.

    Used to retry after a failed background triage.
    """
    report = services.reports.get_report(report_id)
    report_data = report.model_dump(include={"title", "description", "category", "location", "media_urls", "user_id"})
    result = await services.pipeline.on_report_created(report_id, report_data)
    return ProcessReportResponse(
        report_id=report_id,
        priority=result["priority"],
        assigned_department=result["assigned_department"],
        urgent_alert_sent=result["urgent_alert_sent"],
        message="Report processed",
    )
