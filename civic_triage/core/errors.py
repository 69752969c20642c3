"""
Error taxonomy for the triage service.

Fatal errors (InvalidInput, RoutingFailure, ProcessingError) reach the
caller with a stable code. Non-fatal ones (CapabilityDegraded,
LoggingFailure) are only ever logged by the component that absorbs them.
"""

from typing import List, Optional


class TriageError(Exception):
    """Base class for all service errors. Carries a stable error code."""

    code = "internal"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {"code": self.code, "detail": self.message}


class InvalidInput(TriageError):
    """A submitted report violated one or more validation rules."""

    code = "invalid_input"

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__(f"Invalid report data: {', '.join(self.errors)}")

    def to_dict(self) -> dict:
        return {"code": self.code, "detail": self.message, "errors": self.errors}


class CapabilityDegraded(TriageError):
    """Analysis or enrichment failed; a documented default was substituted."""

    code = "capability_degraded"


class RoutingFailure(TriageError):
    """The department assignment could not be persisted."""

    code = "routing_failure"


class PersistenceFailure(TriageError):
    """A processed report could not be written back to the store."""

    code = "persistence_failure"


class LoggingFailure(TriageError):
    """An activity log entry could not be written."""

    code = "logging_failure"


class DispatchFailure(TriageError):
    """One or more notification sends failed."""

    code = "dispatch_failure"

    def __init__(self, message: str, failures: Optional[List[str]] = None):
        super().__init__(message)
        self.failures = list(failures or [])


class InvalidStatusTransition(TriageError):
    """A status change skipped a state or went backwards."""

    code = "invalid_transition"


class ReportNotFound(TriageError):
    code = "not_found"

    def __init__(self, report_id: str):
        self.report_id = report_id
        super().__init__(f"Report {report_id} not found")


class ProcessingError(TriageError):
    """
    Raised at the trigger boundary when triage of a report fails.

    The code is taken from the underlying cause so callers can tell a
    validation rejection from a routing fault without parsing messages.
    """

    code = "processing_error"

    def __init__(self, message: str, cause: Optional[TriageError] = None):
        super().__init__(message, code=cause.code if cause is not None else None)
        self.cause = cause
