"""
Push notification transports (Firebase Cloud Messaging or simulated).
"""

from .base import NotificationTransport
from .fcm_transport import FCMTransport
from .logging_transport import LoggingTransport

__all__ = ["FCMTransport", "LoggingTransport", "NotificationTransport"]
