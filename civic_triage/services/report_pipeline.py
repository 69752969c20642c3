"""
Report Pipeline - triage of a newly created report.

Stages run strictly in order:
  VALIDATING → ANALYZING → ENRICHING → PERSISTING → LOGGING_CREATED
  → ROUTING → LOGGING_ASSIGNED → DONE

DESIGN PRINCIPLES:
- Validation, persistence and routing faults are FATAL
- Analysis, enrichment and activity logging faults are absorbed
- The urgent fan-out runs only after the report is fully persisted and
  routed; its failure never touches persisted state
"""

from enum import Enum
from typing import Any, Dict, Optional
import asyncio
import functools
import logging

from firebase_admin import firestore
from pydantic import BaseModel

from civic_triage.core.errors import (
    DispatchFailure,
    InvalidInput,
    PersistenceFailure,
    ProcessingError,
    RoutingFailure,
)
from civic_triage.models.report import AnalysisResult, Category, Priority, ReportStatus
from civic_triage.services.activity_logger import ActivityLogger
from civic_triage.services.analyzer import ReportAnalyzer
from civic_triage.services.department_router import DepartmentRouter
from civic_triage.services.location_enricher import LocationEnricher
from civic_triage.services.notification_service import NotificationDispatcher
from civic_triage.services.priority_scoring import PriorityScorer
from civic_triage.services.report_store import ReportStore
from civic_triage.services.validation import validate_report

logger = logging.getLogger(__name__)


class PipelineState(str, Enum):
    VALIDATING = "validating"
    ANALYZING = "analyzing"
    ENRICHING = "enriching"
    PERSISTING = "persisting"
    LOGGING_CREATED = "logging_created"
    ROUTING = "routing"
    LOGGING_ASSIGNED = "logging_assigned"
    DONE = "done"
    ERRORED = "errored"


class PipelineOutcome(BaseModel):
    """What the pipeline decided for one report."""
    report_id: str
    state: PipelineState = PipelineState.DONE
    priority: Priority
    priority_score: Optional[int] = None
    priority_reason: Optional[str] = None
    assigned_department: str
    estimated_resolution_hours: int
    requires_urgent_alert: bool
    analysis: AnalysisResult
    location_data: Optional[Dict[str, Any]] = None


class ReportPipeline:

    def __init__(
        self,
        analyzer: ReportAnalyzer,
        enricher: LocationEnricher,
        scorer: PriorityScorer,
        store: ReportStore,
        activity_logger: ActivityLogger,
        router: DepartmentRouter,
        dispatcher: NotificationDispatcher,
        validator=validate_report,
    ):
        self.validator = validator
        self.analyzer = analyzer
        self.enricher = enricher
        self.scorer = scorer
        self.store = store
        self.activity_logger = activity_logger
        self.router = router
        self.dispatcher = dispatcher

    def _log_error(self, report_id: str, state: PipelineState, error: Exception) -> None:
        self.activity_logger.log(report_id, "error", {
            "message": f"Report processing failed while {state.value}",
            "stage": state.value,
            "error": str(error),
        })

    @staticmethod
    def requires_urgent_alert(category: Optional[str], priority: Priority) -> bool:
        return category == Category.SAFETY.value or priority == Priority.HIGH

    def process_new_report(self, report_id: str, report_data: Dict[str, Any]) -> PipelineOutcome:
        """
        Run every stage for one report.

        Raises:
            InvalidInput: validation failed; nothing was stored or logged
            ProcessingError: the processed report could not be persisted
            RoutingFailure: the department assignment could not be persisted
        """
        state = PipelineState.VALIDATING
        self.validator(report_data).raise_for_errors()

        title = report_data.get("title") or ""
        description = report_data.get("description") or ""
        category = report_data.get("category")

        state = PipelineState.ANALYZING
        analysis = self.analyzer.analyze(title, description, category, report_data.get("media_urls") or [])

        state = PipelineState.ENRICHING
        location_data = self.enricher.enrich(report_data.get("location"))

        # The analysis carries the priority, including the default substituted on failure
        priority = analysis.priority
        resolution_hours = self.scorer.estimated_resolution_hours(priority, category)

        state = PipelineState.PERSISTING
        try:
            fields = {
                "ai_analysis": analysis.model_dump(mode="json"),
                "location_data": location_data,
                "priority": priority.value,
                "priority_score": analysis.priority_score,
                "priority_reason": analysis.priority_reason,
                "estimated_resolution_hours": resolution_hours,
                "processed_at": firestore.SERVER_TIMESTAMP,
                "assigned_department": None,
            }
            # A re-run never moves a report back in its status lifecycle
            existing = self.store.get_report(report_id)
            if not (existing or {}).get("status"):
                fields["status"] = ReportStatus.PENDING.value
            self.store.update_report(report_id, fields)
        except Exception as e:
            logger.error(f"Failed to persist processed report {report_id}: {e}", exc_info=True)
            self._log_error(report_id, state, e)
            raise ProcessingError(
                f"Failed to persist processed report {report_id}: {e}",
                cause=PersistenceFailure(str(e)),
            ) from e

        state = PipelineState.LOGGING_CREATED
        self.activity_logger.log(report_id, "created", {
            "message": "Report created and processed",
            "processed_by": "system",
        })

        state = PipelineState.ROUTING
        try:
            assignment = self.router.assign(report_id, category)
        except RoutingFailure as e:
            self._log_error(report_id, state, e)
            raise

        state = PipelineState.DONE
        urgent = self.requires_urgent_alert(category, priority)
        logger.info(
            f"✅ Report {report_id} processed: priority={priority.value} "
            f"(score {analysis.priority_score}), department={assignment.department}, urgent={urgent}"
        )

        return PipelineOutcome(
            report_id=report_id,
            state=state,
            priority=priority,
            priority_score=analysis.priority_score,
            priority_reason=analysis.priority_reason,
            assigned_department=assignment.department,
            estimated_resolution_hours=resolution_hours,
            requires_urgent_alert=urgent,
            analysis=analysis,
            location_data=location_data,
        )

    async def on_report_created(self, report_id: str, report_data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Trigger entry point: process a new report, then alert if urgent.

        Every fatal fault is re-raised as ProcessingError carrying the code of
        its cause, so the trigger host can decide whether to retry.
        """
        loop = asyncio.get_running_loop()
        try:
            outcome = await loop.run_in_executor(
                None, functools.partial(self.process_new_report, report_id, report_data)
            )
        except ProcessingError:
            raise
        except (InvalidInput, RoutingFailure) as e:
            logger.error(f"Report {report_id} failed triage: {e.message}")
            raise ProcessingError(f"Failed to process report {report_id}: {e.message}", cause=e) from e

        urgent_alert_sent = False
        if outcome.requires_urgent_alert:
            report = {**report_data, "id": report_id, "priority": outcome.priority.value}
            try:
                await self.dispatcher.send_urgent_report_notification(report)
                urgent_alert_sent = True
            except DispatchFailure as e:
                logger.error(f"Urgent alert for report {report_id} failed: {e.message}")
                raise ProcessingError(f"Urgent alert for report {report_id} failed: {e.message}", cause=e) from e

        return {
            "success": True,
            "report_id": report_id,
            "priority": outcome.priority.value,
            "assigned_department": outcome.assigned_department,
            "urgent_alert_sent": urgent_alert_sent,
        }
