"""
Health check endpoints.
Used for monitoring, deployment readiness checks, and basic connectivity tests.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException

from civic_triage.core.container import ServiceContainer
from civic_triage.routes.deps import get_services


router = APIRouter(prefix="/health", tags=["Health"])


@router.get("")
async def health_check(services: ServiceContainer = Depends(get_services)):
    """
    Basic health check endpoint.
    Returns 200 if service is running.
    """
    return {
        "status": "healthy",
        "service": services.settings.APP_NAME,
        "version": services.settings.APP_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/db")
def database_health(services: ServiceContainer = Depends(get_services)):
    """
    Store connectivity check.
    Performs a one-document read against the reports collection.
    """
    try:
        services.store.list_reports(limit=1)
    except Exception as e:
        raise HTTPException(
            status_code=503,
            detail=f"Database connection failed: {str(e)}"
        )

    return {
        "status": "healthy",
        "database": type(services.store).__name__,
        "connected": True,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
