"""
Simulated push transport.

No messages leave the process: each send is logged and acknowledged.
Used when NOTIFICATIONS_ENABLED=false (local development, demos).
"""

import logging
import uuid
from typing import List

from civic_triage.models.notification import NotificationMessage, SendResult
from .base import NotificationTransport

logger = logging.getLogger(__name__)


class LoggingTransport(NotificationTransport):

    name = "logging"

    def send_to_tokens(self, tokens: List[str], message: NotificationMessage) -> SendResult:
        logger.info(f"[SIMULATED PUSH] {len(tokens)} token(s): {message.title} - {message.body}")
        return SendResult(success_count=len(tokens), failure_count=0)

    def send_to_topic(self, topic: str, message: NotificationMessage) -> str:
        message_id = f"simulated/{uuid.uuid4().hex[:12]}"
        logger.info(f"[SIMULATED PUSH] topic '{topic}': {message.title} - {message.body} ({message_id})")
        return message_id

    def subscribe(self, tokens: List[str], topic: str) -> SendResult:
        logger.info(f"[SIMULATED PUSH] subscribed {len(tokens)} token(s) to '{topic}'")
        return SendResult(success_count=len(tokens), failure_count=0)

    def unsubscribe(self, tokens: List[str], topic: str) -> SendResult:
        logger.info(f"[SIMULATED PUSH] unsubscribed {len(tokens)} token(s) from '{topic}'")
        return SendResult(success_count=len(tokens), failure_count=0)
