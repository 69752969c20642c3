"""
Report service - Business logic for citizen report handling.

DESIGN NOTE:
- Submission only validates and stores; triage runs in the pipeline
- Priority and department are SYSTEM-DERIVED and dropped if submitted
- Status changes follow the strict workflow and are audit-logged
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
import logging

from firebase_admin import firestore

from civic_triage.core.errors import ReportNotFound
from civic_triage.models.report import Report, ReportStatus
from civic_triage.services.activity_logger import ActivityLogger
from civic_triage.services.report_store import ReportStore
from civic_triage.services.status_workflow import StatusWorkflowEngine
from civic_triage.services.validation import validate_report
from civic_triage.utils.geo import coordinates_of, haversine_km

logger = logging.getLogger(__name__)

# Fields only the triage pipeline may set
SYSTEM_FIELDS = (
    "priority",
    "priority_score",
    "priority_reason",
    "assigned_department",
    "assigned_at",
    "ai_analysis",
    "location_data",
    "estimated_resolution_hours",
    "processed_at",
    "status",
)

NEARBY_SCAN_LIMIT = 500


class ReportService:

    def __init__(self, store: ReportStore, activity_logger: ActivityLogger):
        self.store = store
        self.activity_logger = activity_logger

    def submit_report(self, report_data: Dict[str, Any], media_refs: Optional[List[str]] = None) -> Dict[str, str]:
        """
        Validate and store a new report with status pending.

        Returns:
            {"report_id": <id>}

        Raises:
            InvalidInput: If any validation rule is violated (nothing is stored)
        """
        validate_report(report_data).raise_for_errors()

        document = {key: value for key, value in report_data.items() if key not in SYSTEM_FIELDS and key != "id"}
        document.update({
            "title": report_data["title"].strip(),
            "description": report_data["description"].strip(),
            "media_urls": list(media_refs if media_refs is not None else report_data.get("media_urls") or []),
            "user_id": report_data.get("user_id") or "anonymous",
            "status": ReportStatus.PENDING.value,
            "created_at": firestore.SERVER_TIMESTAMP,
        })

        try:
            report_id = self.store.create_report(document)
        except Exception as e:
            logger.error(f"Failed to save report: {e}", exc_info=True)
            raise

        logger.info(f"Report {report_id} submitted by {document['user_id']} ({document.get('category')})")
        return {"report_id": report_id}

    def get_report(self, report_id: str) -> Report:
        data = self.store.get_report(report_id)
        if data is None:
            raise ReportNotFound(report_id)
        return Report.from_document(report_id, data)

    def update_report_status(
        self,
        report_id: str,
        new_status: str,
        updated_by: str,
        comments: str = "",
    ) -> Report:
        """
        Move a report along pending → in-progress → resolved.

        Raises:
            ReportNotFound: If the report does not exist
            InvalidStatusTransition: If the change skips a state or goes backwards
        """
        current = self.store.get_report(report_id)
        if current is None:
            raise ReportNotFound(report_id)

        old_status = current.get("status") or ReportStatus.PENDING.value
        new_status = ReportStatus(new_status).value
        transition = StatusWorkflowEngine.validate_and_transition(old_status, new_status, updated_by, comments)

        if not transition["changed"]:
            logger.info(f"Report {report_id} already {new_status}; nothing to update")
            return Report.from_document(report_id, current)

        self.store.update_report(report_id, transition["update"])
        self.activity_logger.log(report_id, "status_updated", {
            "old_status": old_status,
            "new_status": new_status,
            "comments": comments,
            "updated_by": updated_by,
        })
        logger.info(f"Report {report_id} status {old_status} → {new_status} by {updated_by}")

        return self.get_report(report_id)

    def get_reports_by_location(self, latitude: float, longitude: float, radius_km: float = 5.0) -> List[Report]:
        """Reports within radius_km of a point, nearest first."""
        nearby = []
        for data in self.store.list_reports(limit=NEARBY_SCAN_LIMIT):
            coordinates = coordinates_of(data.get("location"))
            if coordinates is None:
                continue
            distance = haversine_km(latitude, longitude, *coordinates)
            if distance <= radius_km:
                report = Report.from_document(data["id"], data)
                report.distance_km = round(distance, 2)
                nearby.append(report)

        nearby.sort(key=lambda r: r.distance_km)
        return nearby

    def get_user_reports(self, user_id: str, limit: int = 20) -> List[Report]:
        return [Report.from_document(d["id"], d) for d in self.store.find_reports_by_user(user_id, limit)]

    def list_reports(self, limit: int = 50) -> List[Report]:
        return [Report.from_document(d["id"], d) for d in self.store.list_reports(limit)]

    def get_reports_older_than(self, cutoff: datetime) -> List[Report]:
        """Query used by retention tooling; archiving itself runs elsewhere."""
        return [Report.from_document(d["id"], d) for d in self.store.find_reports_older_than(cutoff)]
