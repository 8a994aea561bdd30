"""Twitch chat to IFTTT webhook notifier."""

__version__ = "1.0.0"
