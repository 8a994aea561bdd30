"""Notifier configuration"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOGGER = logging.getLogger("Config")

ANONYMOUS_IDENTITY = "justinfan0"
IFTTT_WEBHOOK_URL = "https://maker.ifttt.com/trigger/{event_name}/with/key/{key}"

_ANONYMOUS_PATTERN = re.compile(r"justinfan\d+")

# winston level names
_LOG_LEVEL_ALIASES = {
    "WARN": "WARNING",
    "VERBOSE": "DEBUG",
    "SILLY": "DEBUG",
}


class ConfigurationError(ValueError):
    """Raised when the environment cannot produce a runnable configuration."""


class NotifierEnv(BaseSettings):
    """Raw environment input.

    Every field is optional here: ``None`` means the variable is unset, while
    an empty string means it was explicitly set to nothing. The two fall back
    differently in :func:`resolve_settings`.
    """

    model_config = SettingsConfigDict(
        case_sensitive=False,
        extra="ignore",
    )

    # IFTTT webhook
    event_name: str | None = Field(default=None, description="IFTTT Maker event name")
    ifttt_key: str | None = Field(default=None, description="IFTTT Maker webhook key")

    # Twitch identity
    twitch_code: str | None = Field(default=None, description="Twitch chat OAuth token")
    twitch_name: str | None = Field(default=None, description="Twitch login name")

    # Channels and terms (whitespace separated)
    twitch_channels: str | None = Field(default=None, description="Channels to join")
    monitored_channels: str | None = Field(default=None, description="Channels to always forward")
    monitored_terms: str | None = Field(default=None, description="Terms to forward from any channel")

    # Transport
    max_reconnect_attempts: int = Field(default=5, ge=0, description="Chat reconnect attempts")

    # Environment
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is valid"""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = _LOG_LEVEL_ALIASES.get(v.upper(), v.upper())
        if v_upper not in valid_levels:
            LOGGER.warning(f"Invalid log level '{v}', defaulting to INFO")
            return "INFO"
        return v_upper


@dataclass(frozen=True)
class Settings:
    identity: str
    auth_secret: str | None
    monitored_channels: tuple[str, ...]
    monitored_terms: tuple[str, ...]
    join_channels: tuple[str, ...]
    event_name: str
    webhook_key: str
    log_level: str = "INFO"
    max_reconnect_attempts: int = 5

    @property
    def webhook_url(self) -> str:
        return IFTTT_WEBHOOK_URL.format(event_name=self.event_name, key=self.webhook_key)

    @property
    def is_anonymous(self) -> bool:
        return is_anonymous_identity(self.identity)


def split_by_spaces(value: str | None) -> list[str] | None:
    """Split a whitespace separated list, keeping unset distinct from empty."""
    if value is None:
        return None
    return value.split()


def is_anonymous_identity(name: str) -> bool:
    return _ANONYMOUS_PATTERN.match(name) is not None


def load_env() -> NotifierEnv:
    """Read the process environment, turning validation failures into ConfigurationError."""
    try:
        return NotifierEnv()
    except ValidationError as e:
        raise ConfigurationError(f"invalid configuration: {e}") from e


def resolve_settings(env: NotifierEnv) -> Settings:
    """Build validated settings from raw environment input.

    Raises:
        ConfigurationError: the first failed check, in this order: no channels
            to join, nothing monitored, missing auth credential, missing
            webhook configuration.
    """
    fallback = [env.twitch_name] if env.twitch_name else []

    monitored_channels = split_by_spaces(env.monitored_channels)
    if monitored_channels is None:
        monitored_channels = []

    monitored_terms = split_by_spaces(env.monitored_terms)
    if monitored_terms is None:
        monitored_terms = fallback

    other_channels = split_by_spaces(env.twitch_channels)
    if other_channels is None:
        other_channels = fallback

    # Union in first-seen order; monitored entries lose their '#' marker
    join_channels = list(
        dict.fromkeys([name[1:] for name in monitored_channels] + other_channels)
    )
    identity = env.twitch_name or ANONYMOUS_IDENTITY

    LOGGER.info(
        f"Starting up: channels={join_channels} "
        f"monitored_channels={monitored_channels} monitored_terms={monitored_terms}"
    )

    if not join_channels:
        raise ConfigurationError("No channels to join (set TWITCH_CHANNELS env var)")

    if not monitored_channels and not monitored_terms:
        raise ConfigurationError(
            "Nothing is being monitored (set MONITORED_CHANNELS or MONITORED_TERMS env vars)"
        )

    if not is_anonymous_identity(identity) and not env.twitch_code:
        raise ConfigurationError("Missing Twitch auth credential (set TWITCH_CODE env var)")

    if not env.event_name or not env.ifttt_key:
        raise ConfigurationError(
            "Missing IFTTT webhook configuration (set EVENT_NAME and IFTTT_KEY env vars)"
        )

    return Settings(
        identity=identity,
        auth_secret=env.twitch_code or None,
        monitored_channels=tuple(monitored_channels),
        monitored_terms=tuple(monitored_terms),
        join_channels=tuple(join_channels),
        event_name=env.event_name,
        webhook_key=env.ifttt_key,
        log_level=env.log_level,
        max_reconnect_attempts=env.max_reconnect_attempts,
    )
