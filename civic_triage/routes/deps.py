"""
Route dependencies.
"""

from fastapi import Request

from civic_triage.core.container import ServiceContainer


def get_services(request: Request) -> ServiceContainer:
    """The container built at startup and stored on app.state."""
    return request.app.state.services
