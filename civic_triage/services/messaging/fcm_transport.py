import logging
from typing import List, Optional

import firebase_admin
from firebase_admin import messaging

from civic_triage.models.notification import NotificationMessage, SendResult
from .base import NotificationTransport

logger = logging.getLogger(__name__)

# FCM rejects multicast messages with more tokens than this
MAX_TOKENS_PER_MULTICAST = 500


class FCMTransport(NotificationTransport):
    """Firebase Cloud Messaging transport via the Admin SDK."""

    name = "fcm"

    def __init__(self, app: Optional[firebase_admin.App] = None):
        self.app = app

    @staticmethod
    def _notification(message: NotificationMessage) -> messaging.Notification:
        return messaging.Notification(title=message.title, body=message.body)

    def send_to_tokens(self, tokens: List[str], message: NotificationMessage) -> SendResult:
        result = SendResult()
        for start in range(0, len(tokens), MAX_TOKENS_PER_MULTICAST):
            chunk = tokens[start:start + MAX_TOKENS_PER_MULTICAST]
            multicast = messaging.MulticastMessage(
                tokens=chunk,
                notification=self._notification(message),
                data=message.data,
            )
            response = messaging.send_each_for_multicast(multicast, app=self.app)
            result.success_count += response.success_count
            result.failure_count += response.failure_count
        logger.info(
            f"Notification sent to tokens: success={result.success_count}, failure={result.failure_count}"
        )
        return result

    def send_to_topic(self, topic: str, message: NotificationMessage) -> str:
        fcm_message = messaging.Message(
            topic=topic,
            notification=self._notification(message),
            data=message.data,
        )
        message_id = messaging.send(fcm_message, app=self.app)
        logger.info(f"Topic notification sent to '{topic}': {message_id}")
        return message_id

    def subscribe(self, tokens: List[str], topic: str) -> SendResult:
        response = messaging.subscribe_to_topic(tokens, topic, app=self.app)
        return SendResult(success_count=response.success_count, failure_count=response.failure_count)

    def unsubscribe(self, tokens: List[str], topic: str) -> SendResult:
        response = messaging.unsubscribe_from_topic(tokens, topic, app=self.app)
        return SendResult(success_count=response.success_count, failure_count=response.failure_count)
