from abc import ABC, abstractmethod
from typing import List

from civic_triage.models.notification import NotificationMessage, SendResult


class NotificationTransport(ABC):
    """
    Push transport contract.

    Methods are blocking; the dispatcher runs them off the event loop.
    Implementations raise on transport faults.
    """

    name = "base"

    @abstractmethod
    def send_to_tokens(self, tokens: List[str], message: NotificationMessage) -> SendResult:
        """Send to explicit device tokens and report per-token outcome counts."""

    @abstractmethod
    def send_to_topic(self, topic: str, message: NotificationMessage) -> str:
        """Send to every device subscribed to a topic. Returns the message id."""

    @abstractmethod
    def subscribe(self, tokens: List[str], topic: str) -> SendResult:
        """Subscribe device tokens to a topic."""

    @abstractmethod
    def unsubscribe(self, tokens: List[str], topic: str) -> SendResult:
        """Unsubscribe device tokens from a topic."""
