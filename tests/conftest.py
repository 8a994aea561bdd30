"""Pytest configuration and fixtures."""

import pytest

from notifier.core.config import Settings

ENV_KEYS = (
    "EVENT_NAME",
    "IFTTT_KEY",
    "TWITCH_CODE",
    "TWITCH_NAME",
    "TWITCH_CHANNELS",
    "MONITORED_CHANNELS",
    "MONITORED_TERMS",
    "LOG_LEVEL",
    "MAX_RECONNECT_ATTEMPTS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the developer's environment out of configuration tests."""
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def make_settings():
    """Factory for Settings with sensible defaults."""

    def _make(**overrides) -> Settings:
        values = {
            "identity": "notifybot",
            "auth_secret": "oauth:secret",
            "monitored_channels": ("#ninja",),
            "monitored_terms": ("notifybot", "giveaway"),
            "join_channels": ("ninja", "shroud"),
            "event_name": "twitch_chat",
            "webhook_key": "abc123",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def settings(make_settings) -> Settings:
    return make_settings()
