"""
Status Workflow Engine - strict state machine for report status.

DESIGN PRINCIPLES:
- No skipping states
- No backward transitions
- Setting the current status again is a no-op
"""

from typing import Dict, List, Optional
import logging

from firebase_admin import firestore

from civic_triage.core.errors import InvalidStatusTransition
from civic_triage.models.report import ReportStatus

logger = logging.getLogger(__name__)


class StatusWorkflowEngine:
    """
    pending → in-progress → resolved
    """

    # Allowed transitions map: {from_status: [to_status, ...]}
    ALLOWED_TRANSITIONS: Dict[ReportStatus, List[ReportStatus]] = {
        ReportStatus.PENDING: [ReportStatus.IN_PROGRESS],
        ReportStatus.IN_PROGRESS: [ReportStatus.RESOLVED],
        ReportStatus.RESOLVED: [],  # Terminal
    }

    @classmethod
    def is_valid_transition(cls, from_status: str, to_status: str) -> bool:
        try:
            from_enum = ReportStatus(from_status)
            to_enum = ReportStatus(to_status)
        except ValueError:
            return False

        if from_enum == to_enum:
            return True

        return to_enum in cls.ALLOWED_TRANSITIONS.get(from_enum, [])

    @classmethod
    def get_allowed_transitions(cls, current_status: str) -> List[str]:
        try:
            current_enum = ReportStatus(current_status)
        except ValueError:
            return []
        return [status.value for status in cls.ALLOWED_TRANSITIONS.get(current_enum, [])]

    @classmethod
    def validate_and_transition(
        cls,
        current_status: str,
        new_status: str,
        changed_by: str,
        note: Optional[str] = None,
    ) -> Dict:
        """
        Validate a transition and build the fields to store.

        Returns:
            Dict with changed (False for a same-status no-op), from_status,
            to_status and the update fields

        Raises:
            InvalidStatusTransition: If the transition is not allowed
        """
        if not cls.is_valid_transition(current_status, new_status):
            allowed = cls.get_allowed_transitions(current_status)
            raise InvalidStatusTransition(
                f"Invalid status transition: {current_status} → {new_status}. "
                f"Allowed transitions from {current_status}: {allowed}"
            )

        return {
            "changed": current_status != new_status,
            "from_status": current_status,
            "to_status": new_status,
            "update": {
                "status": new_status,
                "last_updated": firestore.SERVER_TIMESTAMP,
                "last_updated_by": changed_by,
                "status_note": note or "",
            },
        }
