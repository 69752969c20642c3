"""
Base response models shared by the API routes.
"""

from pydantic import BaseModel, Field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any


class BaseResponse(BaseModel):
    """
    Base response model for API responses.
    All API responses can extend this for consistency.
    """
    success: bool = True
    message: Optional[str] = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class SubmitReportResponse(BaseResponse):
    report_id: str


class ProcessReportResponse(BaseResponse):
    report_id: str
    priority: Optional[str] = None
    assigned_department: Optional[str] = None
    urgent_alert_sent: bool = False


class AnalysisRequest(BaseModel):
    """Body of the on-demand analysis endpoint."""
    type: str = Field(..., description="text_analysis or image_analysis")
    title: str = ""
    content: str = ""
    category: Optional[str] = None
    media_urls: List[str] = Field(default_factory=list)


class AnalysisResponse(BaseResponse):
    result: Dict[str, Any]
