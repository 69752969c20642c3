"""
Pytest configuration and fixtures.
"""
from datetime import datetime
from typing import AsyncGenerator, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from civic_triage.core.container import build_services
from civic_triage.core.settings import Settings
from civic_triage.models.notification import NotificationMessage, SendResult
from civic_triage.services.messaging.base import NotificationTransport
from civic_triage.services.report_store import MemoryReportStore


class FixedClock:
    """Callable clock pinned to a settable local time."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def at_hour(self, hour: int) -> "FixedClock":
        self.now = self.now.replace(hour=hour)
        return self


class RecordingTransport(NotificationTransport):
    """Records every send; topics or tokens listed in the fail sets raise."""

    name = "recording"

    def __init__(self):
        self.topic_sends: List[tuple] = []
        self.token_sends: List[tuple] = []
        self.subscriptions: List[tuple] = []
        self.unsubscriptions: List[tuple] = []
        self.fail_topics = set()
        self.fail_tokens = set()

    def send_to_tokens(self, tokens: List[str], message: NotificationMessage) -> SendResult:
        if self.fail_tokens.intersection(tokens):
            raise RuntimeError("messaging/invalid-registration-token")
        self.token_sends.append((list(tokens), message))
        return SendResult(success_count=len(tokens), failure_count=0)

    def send_to_topic(self, topic: str, message: NotificationMessage) -> str:
        if topic in self.fail_topics:
            raise RuntimeError(f"topic {topic} unavailable")
        self.topic_sends.append((topic, message))
        return f"projects/test/messages/{len(self.topic_sends)}"

    def subscribe(self, tokens: List[str], topic: str) -> SendResult:
        if topic in self.fail_topics:
            raise RuntimeError(f"topic {topic} unavailable")
        self.subscriptions.append((list(tokens), topic))
        return SendResult(success_count=len(tokens))

    def unsubscribe(self, tokens: List[str], topic: str) -> SendResult:
        self.unsubscriptions.append((list(tokens), topic))
        return SendResult(success_count=len(tokens))

    @property
    def topics_sent(self) -> List[str]:
        return [topic for topic, _ in self.topic_sends]


@pytest.fixture
def test_settings() -> Settings:
    return Settings(
        _env_file=None,
        USE_MOCK_DB=True,
        NOTIFICATIONS_ENABLED=True,
        AI_ENABLED=True,
        AI_PROVIDER="heuristic",
        GEOCODING_PROVIDER="placeholder",
        AUTHORITIES_TOPIC="authorities",
    )


@pytest.fixture
def clock() -> FixedClock:
    # Afternoon by default; night-time tests move it with at_hour()
    return FixedClock(datetime(2026, 3, 14, 14, 0))


@pytest.fixture
def store() -> MemoryReportStore:
    return MemoryReportStore()


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def services(test_settings, store, transport, clock):
    return build_services(test_settings, store=store, transport=transport, clock=clock)


@pytest.fixture
def report_data() -> dict:
    return {
        "title": "Pothole on Main Street",
        "description": "Large pothole on the road causing traffic issues near the school gate",
        "category": "Infrastructure",
        "location": {"latitude": 28.6139, "longitude": 77.2090},
        "media_urls": [],
        "user_id": "user1",
    }


@pytest_asyncio.fixture
async def api_client(services) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX AsyncClient against an app wired to the test container."""
    from civic_triage.main import create_app

    app = create_app(services)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client
