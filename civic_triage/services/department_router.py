"""
Department routing - assigns each report to the responsible department.

A persistence fault here is FATAL for the pipeline: a processed report
without a department is inconsistent and must be retried by the caller.
"""

from datetime import datetime, timezone
from typing import Callable, Optional
import logging

from civic_triage.core.errors import RoutingFailure
from civic_triage.models.report import DepartmentAssignment
from civic_triage.services.activity_logger import ActivityLogger
from civic_triage.services.report_store import ReportStore

logger = logging.getLogger(__name__)


class DepartmentRouter:

    DEPARTMENT_MAPPING = {
        "Infrastructure": "public_works",
        "Utilities": "utilities_dept",
        "Sanitation": "sanitation_dept",
        "Traffic": "traffic_dept",
        "Safety": "police_dept",
        "Other": "general_admin",
    }
    DEFAULT_DEPARTMENT = "general_admin"

    def __init__(
        self,
        store: ReportStore,
        activity_logger: ActivityLogger,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.activity_logger = activity_logger
        self.clock = clock or (lambda: datetime.now(timezone.utc))

    @classmethod
    def department_for(cls, category: Optional[str]) -> str:
        """Total mapping: unknown or missing categories go to general_admin."""
        return cls.DEPARTMENT_MAPPING.get(category or "", cls.DEFAULT_DEPARTMENT)

    def assign(self, report_id: str, category: Optional[str]) -> DepartmentAssignment:
        """
        Persist the department assignment and log it.

        Raises:
            RoutingFailure: if the assignment could not be stored
        """
        department = self.department_for(category)
        assigned_at = self.clock()

        try:
            self.store.update_report(report_id, {
                "assigned_department": department,
                "assigned_at": assigned_at,
            })
        except Exception as e:
            logger.error(f"Failed to assign report {report_id} to {department}: {e}", exc_info=True)
            raise RoutingFailure(f"Failed to assign report {report_id} to {department}: {e}") from e

        self.activity_logger.log(report_id, "assigned", {
            "message": f"Report assigned to {department}",
            "department": department,
        })
        logger.info(f"Report {report_id} assigned to {department}")

        return DepartmentAssignment(department=department, assigned_at=assigned_at)
