"""Chat event model."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChatEvent:
    channel: str  # includes the leading '#'
    sender: str
    message: str
    is_self: bool = False
