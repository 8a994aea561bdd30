"""Webhook notification payload."""

from __future__ import annotations

import json
from dataclasses import dataclass

from .chat_event import ChatEvent


@dataclass(frozen=True)
class NotificationPayload:
    message: str
    sender: str
    channel: str

    @classmethod
    def from_event(cls, event: ChatEvent) -> NotificationPayload:
        return cls(message=event.message, sender=event.sender, channel=event.channel)

    def as_body(self) -> dict[str, str]:
        """IFTTT Maker only accepts the positional value1..value3 fields."""
        return {
            "value1": self.message,
            "value2": self.sender,
            "value3": self.channel,
        }

    def to_json(self) -> str:
        return json.dumps(self.as_body(), separators=(",", ":"), ensure_ascii=False)
