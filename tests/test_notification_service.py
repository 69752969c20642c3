"""Tests for the notification dispatcher."""

import json

import pytest

from civic_triage.core.errors import DispatchFailure
from civic_triage.models.notification import (
    BatchNotificationItem,
    NotificationMessage,
    NotificationPreferences,
)
from civic_triage.services.notification_service import NotificationDispatcher

URGENT_REPORT = {
    "id": "r42",
    "title": "Live wire on footpath",
    "category": "Safety",
    "location": {"latitude": 28.6139, "longitude": 77.2090},
}


@pytest.fixture
def dispatcher(transport):
    return NotificationDispatcher(transport, authorities_topic="authorities")


@pytest.mark.asyncio
async def test_urgent_alert_goes_to_authorities_and_nearby_bucket(dispatcher, transport):
    result = await dispatcher.send_urgent_report_notification(URGENT_REPORT)

    assert result == {"success": True, "topics": ["authorities", "location_2861_7720"]}
    assert sorted(transport.topics_sent) == ["authorities", "location_2861_7720"]

    sent = dict(transport.topic_sends)
    authorities = sent["authorities"]
    assert authorities.title == "🚨 Urgent Report Alert"
    assert authorities.body == "Safety: Live wire on footpath"
    assert authorities.data["type"] == "urgent_report"
    assert authorities.data["report_id"] == "r42"
    assert authorities.data["category"] == "Safety"
    assert json.loads(authorities.data["location"]) == URGENT_REPORT["location"]

    nearby = sent["location_2861_7720"]
    assert nearby.title == "📍 Report Near You"
    assert nearby.body == "New Safety report: Live wire on footpath"


@pytest.mark.asyncio
async def test_urgent_alert_without_location_only_alerts_authorities(dispatcher, transport):
    report = {"title": "Fight outside the bar", "category": "Safety"}
    result = await dispatcher.send_urgent_report_notification(report)

    assert result["topics"] == ["authorities"]
    [(topic, message)] = transport.topic_sends
    assert message.data["report_id"] == "unknown"
    assert "location" not in message.data


@pytest.mark.asyncio
async def test_urgent_alert_settles_every_send_before_failing(dispatcher, transport):
    transport.fail_topics.add("authorities")

    with pytest.raises(DispatchFailure) as exc_info:
        await dispatcher.send_urgent_report_notification(URGENT_REPORT)

    # The nearby send was still attempted and delivered
    assert transport.topics_sent == ["location_2861_7720"]
    assert exc_info.value.code == "dispatch_failure"
    assert len(exc_info.value.failures) == 1
    assert exc_info.value.failures[0].startswith("authorities:")


@pytest.mark.asyncio
async def test_send_to_tokens(dispatcher, transport):
    message = NotificationMessage(title="Hello", body="World", data={"count": 3, "skip": None})
    result = await dispatcher.send_to_tokens(["t1", "t2"], message)

    assert result.success_count == 2
    [(tokens, sent)] = transport.token_sends
    assert tokens == ["t1", "t2"]
    assert sent.data == {"count": "3"}


@pytest.mark.asyncio
async def test_send_to_tokens_fault_is_dispatch_failure(dispatcher, transport):
    transport.fail_tokens.add("bad")
    with pytest.raises(DispatchFailure):
        await dispatcher.send_to_tokens(["bad"], NotificationMessage(title="a", body="b"))


def test_topics_for_preferences():
    preferences = NotificationPreferences(
        categories=["Traffic", "Safety", "Traffic"],
        location={"latitude": 12.9716, "longitude": 77.5946},
        traffic=True,
        weather=False,
    )
    assert NotificationDispatcher.topics_for_preferences(preferences) == [
        "all_users",
        "category_Traffic",
        "category_Safety",
        "location_1297_7759",
        "traffic_updates",
    ]


@pytest.mark.asyncio
async def test_subscribe_and_unsubscribe(dispatcher, transport):
    preferences = NotificationPreferences(categories=["Sanitation"], weather=True)

    result = await dispatcher.subscribe_to_topics("device-1", preferences)
    assert result["topics"] == ["all_users", "category_Sanitation", "weather_updates"]
    assert sorted(topic for _, topic in transport.subscriptions) == sorted(result["topics"])

    await dispatcher.unsubscribe_from_topics("device-1", ["weather_updates"])
    assert transport.unsubscriptions == [(["device-1"], "weather_updates")]


@pytest.mark.asyncio
async def test_subscribe_failure_reports_failed_topics(dispatcher, transport):
    transport.fail_topics.add("category_Traffic")
    with pytest.raises(DispatchFailure) as exc_info:
        await dispatcher.subscribe_to_topics("device-1", NotificationPreferences(categories=["Traffic"]))
    assert exc_info.value.failures == ["category_Traffic: topic category_Traffic unavailable"]


@pytest.mark.asyncio
async def test_batch_is_best_effort(dispatcher, transport):
    transport.fail_topics.add("broken_topic")
    note = NotificationMessage(title="Water cut", body="Supply off 10:00-14:00")
    items = [
        BatchNotificationItem(kind="topic", topic="category_Utilities", notification=note),
        BatchNotificationItem(kind="topic", topic="broken_topic", notification=note),
        BatchNotificationItem(kind="token", tokens=["t1"], notification=note),
    ]

    result = await dispatcher.send_batch_notifications(items)

    assert result.success is True
    assert result.success_count == 2
    assert result.failure_count == 1
    assert [r.success for r in result.results] == [True, False, True]
    assert "broken_topic" in result.results[1].error


@pytest.mark.asyncio
async def test_news_traffic_and_weather_alert_topics(dispatcher, transport):
    await dispatcher.send_news_alert({"id": "n1", "title": "Road closed", "category": "traffic", "priority": "low"})
    await dispatcher.send_news_alert({"id": "n2", "title": "Flood warning", "category": "weather", "priority": "high"})
    await dispatcher.send_traffic_alert({"route": "Ring Road", "status": "heavy", "delay": "20 min"})
    await dispatcher.send_weather_alert({"severity": "moderate", "description": "Light rain expected"})

    assert transport.topics_sent == ["category_traffic", "all_users", "traffic_updates", "weather_updates"]
    traffic = transport.topic_sends[2][1]
    assert traffic.body == "Ring Road: heavy traffic, 20 min delay"
