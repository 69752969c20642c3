"""
Report persistence.

Reports live in the "reports" collection keyed by report id; the audit
trail lives in the append-only "reportLogs" collection. The pipeline only
talks to the ReportStore interface so the Firestore client can be swapped
for the in-memory store in local runs and tests.
"""

from abc import ABC, abstractmethod
from copy import deepcopy
from datetime import datetime, timezone
from typing import Dict, List, Optional
import logging
import threading
import uuid

from firebase_admin import firestore

from civic_triage.core.errors import ReportNotFound
from civic_triage.utils.firestore_helpers import where_filter, snapshot_to_dict

logger = logging.getLogger(__name__)

REPORTS_COLLECTION = "reports"
ACTIVITY_LOG_COLLECTION = "reportLogs"


class ReportStore(ABC):
    """
    Keyed persistence for reports plus an append-only activity log.

    Timestamp fields may be given as firestore.SERVER_TIMESTAMP; every
    implementation resolves it to the write time.
    """

    @abstractmethod
    def create_report(self, data: Dict) -> str:
        """Store a new report and return its generated id."""

    @abstractmethod
    def get_report(self, report_id: str) -> Optional[Dict]:
        """Return the report (with its id) or None if it does not exist."""

    @abstractmethod
    def set_report(self, report_id: str, data: Dict) -> None:
        """Create or overwrite a report under a known id."""

    @abstractmethod
    def update_report(self, report_id: str, fields: Dict) -> None:
        """Merge fields into an existing report. Fails if the report is missing."""

    @abstractmethod
    def add_activity_log(self, entry: Dict) -> str:
        """Append an activity log entry and return its id."""

    @abstractmethod
    def list_reports(self, limit: int = 50) -> List[Dict]:
        """Newest reports first."""

    @abstractmethod
    def find_reports_by_user(self, user_id: str, limit: int = 20) -> List[Dict]:
        """Newest reports submitted by a user first."""

    @abstractmethod
    def find_reports_older_than(self, cutoff: datetime) -> List[Dict]:
        """Reports created before the cutoff (used by retention tooling)."""


class FirestoreReportStore(ReportStore):
    """ReportStore backed by Cloud Firestore."""

    def __init__(self, db):
        self.db = db

    def _reports(self):
        return self.db.collection(REPORTS_COLLECTION)

    def create_report(self, data: Dict) -> str:
        doc_ref = self._reports().document()
        doc_ref.set(data)
        logger.info(f"Report saved to Firestore: {doc_ref.id}")
        return doc_ref.id

    def get_report(self, report_id: str) -> Optional[Dict]:
        doc = self._reports().document(report_id).get()
        if not doc.exists:
            return None
        return snapshot_to_dict(doc)

    def set_report(self, report_id: str, data: Dict) -> None:
        self._reports().document(report_id).set(data)

    def update_report(self, report_id: str, fields: Dict) -> None:
        self._reports().document(report_id).update(fields)

    def add_activity_log(self, entry: Dict) -> str:
        _, doc_ref = self.db.collection(ACTIVITY_LOG_COLLECTION).add(entry)
        return doc_ref.id

    def list_reports(self, limit: int = 50) -> List[Dict]:
        query = self._reports().order_by("created_at", direction=firestore.Query.DESCENDING).limit(limit)
        return [snapshot_to_dict(doc) for doc in query.stream()]

    def find_reports_by_user(self, user_id: str, limit: int = 20) -> List[Dict]:
        query = where_filter(self._reports(), "user_id", "==", user_id)
        query = query.order_by("created_at", direction=firestore.Query.DESCENDING).limit(limit)
        return [snapshot_to_dict(doc) for doc in query.stream()]

    def find_reports_older_than(self, cutoff: datetime) -> List[Dict]:
        query = where_filter(self._reports(), "created_at", "<", cutoff)
        return [snapshot_to_dict(doc) for doc in query.stream()]


class MemoryReportStore(ReportStore):
    """
    In-process ReportStore for local development (USE_MOCK_DB) and tests.

    Data is lost on restart.
    """

    def __init__(self):
        self.reports: Dict[str, Dict] = {}
        self.activity_logs: List[Dict] = []
        self._lock = threading.Lock()

    @staticmethod
    def _resolve_timestamps(data: Dict) -> Dict:
        now = datetime.now(timezone.utc)
        return {
            key: (now if value is firestore.SERVER_TIMESTAMP else value)
            for key, value in data.items()
        }

    def create_report(self, data: Dict) -> str:
        report_id = uuid.uuid4().hex[:20]
        self.set_report(report_id, data)
        return report_id

    def get_report(self, report_id: str) -> Optional[Dict]:
        with self._lock:
            data = self.reports.get(report_id)
            if data is None:
                return None
            result = deepcopy(data)
        result["id"] = report_id
        return result

    def set_report(self, report_id: str, data: Dict) -> None:
        with self._lock:
            self.reports[report_id] = self._resolve_timestamps(deepcopy(data))

    def update_report(self, report_id: str, fields: Dict) -> None:
        with self._lock:
            if report_id not in self.reports:
                raise ReportNotFound(report_id)
            self.reports[report_id].update(self._resolve_timestamps(deepcopy(fields)))

    def add_activity_log(self, entry: Dict) -> str:
        with self._lock:
            stored = self._resolve_timestamps(deepcopy(entry))
            stored["id"] = uuid.uuid4().hex[:20]
            self.activity_logs.append(stored)
            return stored["id"]

    def logs_for(self, report_id: str) -> List[Dict]:
        with self._lock:
            return [deepcopy(e) for e in self.activity_logs if e.get("report_id") == report_id]

    def _all(self) -> List[Dict]:
        with self._lock:
            items = [dict(deepcopy(data), id=report_id) for report_id, data in self.reports.items()]
        return items

    @staticmethod
    def _created_key(report: Dict) -> datetime:
        created_at = report.get("created_at")
        if isinstance(created_at, datetime):
            return created_at if created_at.tzinfo else created_at.replace(tzinfo=timezone.utc)
        return datetime.min.replace(tzinfo=timezone.utc)

    def list_reports(self, limit: int = 50) -> List[Dict]:
        return sorted(self._all(), key=self._created_key, reverse=True)[:limit]

    def find_reports_by_user(self, user_id: str, limit: int = 20) -> List[Dict]:
        mine = [r for r in self._all() if r.get("user_id") == user_id]
        return sorted(mine, key=self._created_key, reverse=True)[:limit]

    def find_reports_older_than(self, cutoff: datetime) -> List[Dict]:
        if cutoff.tzinfo is None:
            cutoff = cutoff.replace(tzinfo=timezone.utc)
        return [r for r in self._all() if r.get("created_at") is not None and self._created_key(r) < cutoff]
