"""
Notification endpoints - direct sends, topic subscriptions and batches.
"""

from fastapi import APIRouter, Depends

from civic_triage.core.container import ServiceContainer
from civic_triage.models.notification import (
    BatchRequest,
    BatchResult,
    NotificationMessage,
    SendToTokensRequest,
    SubscribeRequest,
    UnsubscribeRequest,
)
from civic_triage.routes.deps import get_services

router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.post("/send")
async def send_notification(request: SendToTokensRequest, services: ServiceContainer = Depends(get_services)):
    notification = NotificationMessage(title=request.title, body=request.body, data=request.data)
    result = await services.dispatcher.send_to_tokens(request.tokens, notification)
    return {"success": True, **result.model_dump()}


@router.post("/subscribe")
async def subscribe(request: SubscribeRequest, services: ServiceContainer = Depends(get_services)):
    """Subscribe a device token to the topics implied by the user's preferences."""
    return await services.dispatcher.subscribe_to_topics(request.token, request.preferences)


@router.post("/unsubscribe")
async def unsubscribe(request: UnsubscribeRequest, services: ServiceContainer = Depends(get_services)):
    return await services.dispatcher.unsubscribe_from_topics(request.token, request.topics)


@router.post("/batch", response_model=BatchResult)
async def send_batch(request: BatchRequest, services: ServiceContainer = Depends(get_services)):
    """Best-effort: per-item failures are reported in the result, never as an error status."""
    return await services.dispatcher.send_batch_notifications(request.notifications)
