"""
Notification Dispatcher - push notifications to devices and topics.

DESIGN PRINCIPLES:
- Send faults are surfaced to the immediate caller as DispatchFailure
- They never roll back anything the caller already persisted
- Multi-target sends run concurrently and always settle fully before
  the overall outcome is reported
"""

from typing import Any, Dict, List, Optional
import asyncio
import functools
import json
import logging

from civic_triage.core.errors import DispatchFailure
from civic_triage.models.notification import (
    BatchItemResult,
    BatchNotificationItem,
    BatchResult,
    NotificationMessage,
    NotificationPreferences,
    SendResult,
)
from civic_triage.services.messaging.base import NotificationTransport
from civic_triage.utils.geo import coordinates_of, geo_bucket_topic

logger = logging.getLogger(__name__)

ALL_USERS_TOPIC = "all_users"
TRAFFIC_TOPIC = "traffic_updates"
WEATHER_TOPIC = "weather_updates"


def category_topic(category: str) -> str:
    return f"category_{category}"


class NotificationDispatcher:

    def __init__(self, transport: NotificationTransport, authorities_topic: str = "authorities"):
        self.transport = transport
        self.authorities_topic = authorities_topic

    async def _run(self, func, *args):
        """Run a blocking transport call in the default executor."""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args))

    # ------------------------------------------------------------------
    # Primitives
    # ------------------------------------------------------------------

    async def send_to_tokens(self, tokens: List[str], notification: NotificationMessage) -> SendResult:
        if isinstance(tokens, str):
            tokens = [tokens]
        try:
            return await self._run(self.transport.send_to_tokens, list(tokens), notification)
        except Exception as e:
            logger.error(f"Error sending notification to {len(tokens)} token(s): {e}")
            raise DispatchFailure(f"Failed to send notification to tokens: {e}") from e

    async def send_to_topic(self, topic: str, notification: NotificationMessage) -> str:
        try:
            return await self._run(self.transport.send_to_topic, topic, notification)
        except Exception as e:
            logger.error(f"Error sending notification to topic '{topic}': {e}")
            raise DispatchFailure(f"Failed to send notification to topic '{topic}': {e}") from e

    async def _send_to_topics(self, sends: List[tuple]) -> Dict[str, str]:
        """
        Send (topic, notification) pairs concurrently.

        Waits for every send to settle, then raises DispatchFailure naming
        all the topics that failed.
        """
        results = await asyncio.gather(
            *(self.send_to_topic(topic, notification) for topic, notification in sends),
            return_exceptions=True,
        )
        failures = [
            f"{topic}: {result.message if isinstance(result, DispatchFailure) else result}"
            for (topic, _), result in zip(sends, results)
            if isinstance(result, BaseException)
        ]
        if failures:
            raise DispatchFailure(f"{len(failures)} of {len(sends)} topic send(s) failed", failures=failures)
        return {topic: message_id for (topic, _), message_id in zip(sends, results)}

    # ------------------------------------------------------------------
    # Composite alerts
    # ------------------------------------------------------------------

    async def send_urgent_report_notification(self, report: Dict[str, Any]) -> Dict[str, Any]:
        """
        Alert authorities about an urgent report, and nearby users if it has a location.
        """
        category = report.get("category") or "Other"
        title = report.get("title") or ""
        location = report.get("location")
        coordinates = coordinates_of(location)

        notification = NotificationMessage(
            title="🚨 Urgent Report Alert",
            body=f"{category}: {title}",
            data={
                "type": "urgent_report",
                "report_id": report.get("id") or "unknown",
                "category": category,
                "location": json.dumps(location) if location else None,
            },
        )
        sends = [(self.authorities_topic, notification)]

        if coordinates is not None:
            nearby = notification.model_copy(update={
                "title": "📍 Report Near You",
                "body": f"New {category} report: {title}",
            })
            sends.append((geo_bucket_topic(*coordinates), nearby))

        sent = await self._send_to_topics(sends)
        logger.info(f"🚨 Urgent alert for report {report.get('id')} sent to {list(sent)}")
        return {"success": True, "topics": list(sent)}

    async def send_news_alert(self, news: Dict[str, Any]) -> Dict[str, Any]:
        category = news.get("category") or "general"
        notification = NotificationMessage(
            title=f"📰 {category.upper()} Alert",
            body=news.get("title") or "",
            data={
                "type": "news_alert",
                "news_id": news.get("id"),
                "category": category,
                "priority": news.get("priority"),
                "location": json.dumps(news["location"]) if news.get("location") else None,
            },
        )
        topic = ALL_USERS_TOPIC if news.get("priority") == "high" else category_topic(category)
        await self.send_to_topic(topic, notification)
        return {"success": True, "topics": [topic]}

    async def send_traffic_alert(self, traffic: Dict[str, Any]) -> Dict[str, Any]:
        notification = NotificationMessage(
            title="🚦 Traffic Update",
            body=f"{traffic.get('route')}: {traffic.get('status')} traffic, {traffic.get('delay')} delay",
            data={
                "type": "traffic_alert",
                "route": traffic.get("route"),
                "status": traffic.get("status"),
                "delay": traffic.get("delay"),
                "location": json.dumps(traffic["location"]) if traffic.get("location") else None,
            },
        )
        await self.send_to_topic(TRAFFIC_TOPIC, notification)
        return {"success": True, "topics": [TRAFFIC_TOPIC]}

    async def send_weather_alert(self, weather: Dict[str, Any]) -> Dict[str, Any]:
        notification = NotificationMessage(
            title="🌤️ Weather Alert",
            body=weather.get("description") or "",
            data={
                "type": "weather_alert",
                "severity": weather.get("severity"),
                "description": weather.get("description"),
            },
        )
        topic = ALL_USERS_TOPIC if weather.get("severity") == "high" else WEATHER_TOPIC
        await self.send_to_topic(topic, notification)
        return {"success": True, "topics": [topic]}

    # ------------------------------------------------------------------
    # Topic subscriptions
    # ------------------------------------------------------------------

    @staticmethod
    def topics_for_preferences(preferences: NotificationPreferences) -> List[str]:
        topics = [ALL_USERS_TOPIC]
        topics.extend(category_topic(category) for category in preferences.categories)
        if preferences.location is not None:
            topics.append(geo_bucket_topic(preferences.location.latitude, preferences.location.longitude))
        if preferences.traffic:
            topics.append(TRAFFIC_TOPIC)
        if preferences.weather:
            topics.append(WEATHER_TOPIC)
        # Preserve order, drop duplicate categories
        return list(dict.fromkeys(topics))

    async def _manage_topics(self, func, token: str, topics: List[str], verb: str) -> Dict[str, Any]:
        results = await asyncio.gather(
            *(self._run(func, [token], topic) for topic in topics),
            return_exceptions=True,
        )
        failures = [f"{topic}: {result}" for topic, result in zip(topics, results) if isinstance(result, BaseException)]
        if failures:
            logger.error(f"Error {verb} topics: {failures}")
            raise DispatchFailure(f"Failed {verb} {len(failures)} of {len(topics)} topic(s)", failures=failures)
        logger.info(f"Device {verb} {len(topics)} topic(s)")
        return {"success": True, "topics": topics}

    async def subscribe_to_topics(self, token: str, preferences: NotificationPreferences) -> Dict[str, Any]:
        """Subscribe a device to the topics implied by a user's preferences."""
        topics = self.topics_for_preferences(preferences)
        return await self._manage_topics(self.transport.subscribe, token, topics, "subscribing to")

    async def unsubscribe_from_topics(self, token: str, topics: List[str]) -> Dict[str, Any]:
        return await self._manage_topics(self.transport.unsubscribe, token, list(topics), "unsubscribing from")

    # ------------------------------------------------------------------
    # Batch
    # ------------------------------------------------------------------

    async def _send_item(self, item: BatchNotificationItem):
        if item.kind == "token":
            return await self.send_to_tokens(item.tokens, item.notification)
        return await self.send_to_topic(item.topic, item.notification)

    async def send_batch_notifications(self, items: List[BatchNotificationItem]) -> BatchResult:
        """
        Dispatch all items concurrently.

        Best-effort: every item is attempted and counted; one failure never
        aborts the others.
        """
        outcomes = await asyncio.gather(*(self._send_item(item) for item in items), return_exceptions=True)

        results = []
        for index, (item, outcome) in enumerate(zip(items, outcomes)):
            if isinstance(outcome, BaseException):
                error: Optional[str] = outcome.message if isinstance(outcome, DispatchFailure) else str(outcome)
                results.append(BatchItemResult(index=index, kind=item.kind, success=False, error=error))
            else:
                results.append(BatchItemResult(index=index, kind=item.kind, success=True))

        success_count = sum(1 for r in results if r.success)
        failure_count = len(results) - success_count
        logger.info(f"Batch notifications: {success_count} succeeded, {failure_count} failed")

        return BatchResult(
            success=True,
            success_count=success_count,
            failure_count=failure_count,
            results=results,
        )
