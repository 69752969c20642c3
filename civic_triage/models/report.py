"""
Pydantic models for citizen reports and their triage results.
"""

from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List, Dict, Any
from enum import Enum


class Category(str, Enum):
    """Report categories selectable by citizens."""
    INFRASTRUCTURE = "Infrastructure"
    UTILITIES = "Utilities"
    SANITATION = "Sanitation"
    TRAFFIC = "Traffic"
    SAFETY = "Safety"
    OTHER = "Other"


class ReportStatus(str, Enum):
    """
    Report lifecycle.

    pending → in-progress → resolved
    """
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    RESOLVED = "resolved"


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Sentiment(str, Enum):
    URGENT = "urgent"
    NEGATIVE = "negative"
    POSITIVE = "positive"
    NEUTRAL = "neutral"


class Severity(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    SEVERE = "severe"


class Location(BaseModel):
    """Raw coordinates as captured by the mobile client."""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class ReportSubmission(BaseModel):
    """
    Incoming report body.

    Deliberately loose: field rules are checked by the validator so that
    every violation is reported together instead of pydantic stopping at
    the first type error. Triage fields (priority, assigned department)
    are not part of this model and are dropped if sent.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[Dict[str, Any]] = None
    media_urls: List[str] = Field(default_factory=list)
    user_id: Optional[str] = None

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Pothole on Main Street",
                "description": "Large pothole causing traffic issues near the school gate",
                "category": "Infrastructure",
                "location": {"latitude": 28.6139, "longitude": 77.2090},
                "media_urls": ["https://example.com/pothole.jpg"],
                "user_id": "user1",
            }
        }
        extra = "ignore"


class MediaAnalysis(BaseModel):
    """Result of analysing attached media."""
    has_images: bool = False
    image_count: int = 0
    detected_objects: List[str] = Field(default_factory=list)
    object_count: int = 0
    confidence: float = Field(default=0.0, ge=0.0, le=1.0)
    description: str = ""


class AnalysisResult(BaseModel):
    """
    Analysis of a report's free text (and optionally its media).
    Embedded into the report it was computed for; never stored on its own.
    """
    sentiment: Sentiment = Sentiment.NEUTRAL
    priority: Priority = Priority.MEDIUM
    priority_score: Optional[int] = None
    priority_reason: Optional[str] = None
    tags: List[str] = Field(default_factory=list)
    confidence: float = Field(default=0.5, ge=0.0, le=1.0)
    suggested_category: Optional[str] = None
    estimated_severity: Severity = Severity.MODERATE
    media_analysis: Optional[MediaAnalysis] = None
    model_name: Optional[str] = None

    @classmethod
    def default_for(cls, category: Optional[str]) -> "AnalysisResult":
        """The documented substitute used when analysis fails."""
        return cls(
            sentiment=Sentiment.NEUTRAL,
            priority=Priority.MEDIUM,
            tags=[],
            confidence=0.5,
            suggested_category=category,
            estimated_severity=Severity.MODERATE,
            model_name="fallback",
        )


class LocationEnrichment(BaseModel):
    """Administrative metadata derived from coordinates."""
    address: Optional[str] = None
    ward: Optional[str] = None
    district: Optional[str] = None
    pincode: Optional[str] = None
    nearby_landmarks: List[str] = Field(default_factory=list)
    administrative_area: Optional[str] = None
    provider: Optional[str] = None


class DepartmentAssignment(BaseModel):
    department: str
    assigned_at: datetime


class StatusUpdate(BaseModel):
    """Status change requested by an external actor (staff tooling)."""
    status: ReportStatus
    updated_by: str = Field(..., min_length=1)
    comments: str = ""


class Report(BaseModel):
    """
    Report as returned by the API.
    Triage fields stay empty until the pipeline has processed the report.
    """
    id: str
    title: str
    description: str
    category: Optional[str] = None
    location: Optional[Dict[str, Any]] = None
    media_urls: List[str] = Field(default_factory=list)
    user_id: Optional[str] = None
    status: ReportStatus = ReportStatus.PENDING
    priority: Optional[Priority] = None
    assigned_department: Optional[str] = None
    estimated_resolution_hours: Optional[int] = None
    ai_analysis: Optional[Dict[str, Any]] = None
    location_data: Optional[Dict[str, Any]] = None
    distance_km: Optional[float] = None
    created_at: Optional[datetime] = None
    processed_at: Optional[datetime] = None
    assigned_at: Optional[datetime] = None

    @classmethod
    def from_document(cls, report_id: str, data: Dict[str, Any]) -> "Report":
        return cls(id=report_id, **{k: v for k, v in data.items() if k != "id"})

    class Config:
        extra = "ignore"


class ActivityLogEntry(BaseModel):
    """Append-only audit trail record for a report."""
    report_id: str
    action: str
    metadata: Dict[str, Any] = Field(default_factory=dict)
    timestamp: Optional[datetime] = None
    created_by: str = "system"
