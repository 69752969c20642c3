"""
Civic Triage - FastAPI Application Entry Point

Accepts citizen reports about local problems, triages them (analysis,
location enrichment, priority, department routing) and alerts the
responsible authorities and nearby residents about urgent ones.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from civic_triage.core.container import ServiceContainer, build_services
from civic_triage.core.errors import (
    DispatchFailure,
    InvalidInput,
    InvalidStatusTransition,
    ReportNotFound,
    TriageError,
)
from civic_triage.core.settings import Settings, settings as default_settings
from civic_triage.routes import analysis, health, notifications, reports

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    ReportNotFound: status.HTTP_404_NOT_FOUND,
    InvalidStatusTransition: status.HTTP_409_CONFLICT,
    DispatchFailure: status.HTTP_502_BAD_GATEWAY,
}


def _status_code_for(exc: TriageError) -> int:
    for error_type, status_code in ERROR_STATUS_CODES.items():
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def create_app(services: Optional[ServiceContainer] = None, config: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    When services is not given, the container is built from settings on startup.
    """
    config = services.settings if services is not None else (config or default_settings)

    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    app = FastAPI(
        title=config.APP_NAME,
        version=config.APP_VERSION,
        description="Triage pipeline for citizen-submitted civic reports",
        debug=config.DEBUG,
    )
    app.state.services = services

    @app.exception_handler(TriageError)
    async def triage_error_handler(request: Request, exc: TriageError):
        status_code = _status_code_for(exc)
        if status_code >= 500:
            logger.error(f"❌ {request.method} {request.url.path} failed [{exc.code}]: {exc.message}")
        else:
            logger.info(f"{request.method} {request.url.path} rejected [{exc.code}]: {exc.message}")
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.info(f"{request.method} {request.url.path} request validation failed: {exc.errors()}")
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"code": "request_validation", "detail": jsonable_encoder(exc.errors())},
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    async def startup_event():
        logger.info(f"Starting {config.APP_NAME} v{config.APP_VERSION}")
        if app.state.services is None:
            app.state.services = build_services(config)

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info(f"Shutting down {config.APP_NAME}")

    app.include_router(health.router)
    app.include_router(reports.router)
    app.include_router(notifications.router)
    app.include_router(analysis.router)

    @app.get("/")
    async def root():
        """
        Root endpoint - API information.
        """
        return {
            "service": config.APP_NAME,
            "version": config.APP_VERSION,
            "status": "running",
            "docs": "/docs",
            "health": "/health",
        }

    return app


app = create_app()
