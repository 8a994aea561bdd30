"""Data models shared by the notifier components."""

from .chat_event import ChatEvent
from .notification import NotificationPayload

__all__ = [
    "ChatEvent",
    "NotificationPayload",
]
