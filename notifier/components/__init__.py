"""Message filtering and notification dispatch."""

from .dispatcher import DispatchResult, NotificationDispatcher
from .message_filter import MessageFilter

__all__ = [
    "DispatchResult",
    "MessageFilter",
    "NotificationDispatcher",
]
