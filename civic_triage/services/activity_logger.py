"""
Activity logger - append-only audit trail for reports.

Writes are best-effort: a failed write is logged and swallowed so it can
never fail or retry the operation that triggered it.
"""

from typing import Any, Dict, Optional
import logging

from firebase_admin import firestore

from civic_triage.core.errors import LoggingFailure
from civic_triage.services.report_store import ReportStore

logger = logging.getLogger(__name__)


class ActivityLogger:

    def __init__(self, store: ReportStore, actor: str = "system"):
        self.store = store
        self.actor = actor

    def log(self, report_id: str, action: str, metadata: Optional[Dict[str, Any]] = None) -> bool:
        """
        Append {report_id, action, metadata, timestamp, created_by}.

        Returns:
            True if the entry was written, False if the write failed
        """
        entry = {
            "report_id": report_id,
            "action": action,
            "metadata": metadata or {},
            "timestamp": firestore.SERVER_TIMESTAMP,
            "created_by": self.actor,
        }
        try:
            self.store.add_activity_log(entry)
            logger.debug(f"Activity '{action}' logged for report {report_id}")
            return True
        except Exception as e:
            failure = LoggingFailure(f"Failed to write '{action}' activity for report {report_id}: {e}")
            logger.error(failure.message, exc_info=True)
            return False
