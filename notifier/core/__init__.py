"""Core modules for the notifier."""

from .config import (
    ANONYMOUS_IDENTITY,
    ConfigurationError,
    NotifierEnv,
    Settings,
    load_env,
    resolve_settings,
)
from .irc import IRCMessage, parse_line
from .logging import setup_logging

__all__ = [
    # Settings
    "ANONYMOUS_IDENTITY",
    "ConfigurationError",
    "NotifierEnv",
    "Settings",
    "load_env",
    "resolve_settings",
    # IRC
    "IRCMessage",
    "parse_line",
    # Setup functions
    "setup_logging",
]
