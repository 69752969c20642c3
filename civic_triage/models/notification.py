"""
Pydantic models for push notifications and topic subscriptions.
Notifications are ephemeral and never persisted.
"""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List, Dict, Any, Literal

from civic_triage.models.report import Location


class NotificationMessage(BaseModel):
    """
    A push notification payload.

    FCM data payloads only carry strings, so values are coerced to str
    and None values are dropped.
    """
    title: str
    body: str
    data: Dict[str, str] = Field(default_factory=dict)

    @field_validator("data", mode="before")
    @classmethod
    def _stringify_data(cls, value: Any) -> Dict[str, str]:
        if not value:
            return {}
        return {str(k): str(v) for k, v in value.items() if v is not None}


class SendResult(BaseModel):
    """Outcome of a multicast send to explicit device tokens."""
    success_count: int = 0
    failure_count: int = 0


class NotificationPreferences(BaseModel):
    """What a user wants to hear about."""
    categories: List[str] = Field(default_factory=list)
    location: Optional[Location] = None
    traffic: bool = False
    weather: bool = False


class BatchNotificationItem(BaseModel):
    """One entry of a batch send: either to tokens or to a topic."""
    kind: Literal["token", "topic"]
    tokens: List[str] = Field(default_factory=list)
    topic: Optional[str] = None
    notification: NotificationMessage

    @model_validator(mode="after")
    def _check_target(self) -> "BatchNotificationItem":
        if self.kind == "token" and not self.tokens:
            raise ValueError("tokens are required for kind='token'")
        if self.kind == "topic" and not self.topic:
            raise ValueError("topic is required for kind='topic'")
        return self


class BatchItemResult(BaseModel):
    index: int
    kind: str
    success: bool
    error: Optional[str] = None


class BatchResult(BaseModel):
    """Aggregate result of a batch send. One failed item never aborts the rest."""
    success: bool = True
    success_count: int = 0
    failure_count: int = 0
    results: List[BatchItemResult] = Field(default_factory=list)


class SendToTokensRequest(BaseModel):
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    tokens: List[str] = Field(..., min_length=1)
    data: Dict[str, Any] = Field(default_factory=dict)


class SubscribeRequest(BaseModel):
    token: str = Field(..., min_length=1)
    preferences: NotificationPreferences = Field(default_factory=NotificationPreferences)


class UnsubscribeRequest(BaseModel):
    token: str = Field(..., min_length=1)
    topics: List[str] = Field(..., min_length=1)


class BatchRequest(BaseModel):
    notifications: List[BatchNotificationItem] = Field(..., min_length=1)
