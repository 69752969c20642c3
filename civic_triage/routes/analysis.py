"""
On-demand analysis endpoint.

Runs the same analyzers the triage pipeline uses, without storing anything.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from civic_triage.core.container import ServiceContainer
from civic_triage.models.base import AnalysisRequest, AnalysisResponse
from civic_triage.routes.deps import get_services

router = APIRouter(prefix="/ai", tags=["AI"])

TEXT_ANALYSIS = "text_analysis"
IMAGE_ANALYSIS = "image_analysis"


@router.post("/analyze", response_model=AnalysisResponse)
def analyze(request: AnalysisRequest, services: ServiceContainer = Depends(get_services)):
    if request.type == TEXT_ANALYSIS:
        result = services.analyzer.analyze(request.title, request.content, request.category)
    elif request.type == IMAGE_ANALYSIS:
        if not request.media_urls:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="media_urls are required for image_analysis",
            )
        result = services.analyzer.analyze_media(request.media_urls)
    else:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Invalid analysis type: {request.type}",
        )

    return AnalysisResponse(result=result.model_dump(mode="json"))
