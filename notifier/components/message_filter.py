import logging

from notifier.core.config import Settings
from notifier.models import ChatEvent

LOGGER: logging.Logger = logging.getLogger("MessageFilter")


class MessageFilter:
    """Decides which chat messages are forwarded to the webhook."""

    def __init__(self, settings: Settings) -> None:
        self.identity = settings.identity
        self.monitored_channels = frozenset(settings.monitored_channels)
        self.monitored_terms = settings.monitored_terms

    def is_monitored_channel(self, channel: str) -> bool:
        result = channel in self.monitored_channels
        LOGGER.debug(f"Checking if channel is monitored: channel={channel} monitored={result}")
        return result

    def find_monitored_term(self, message: str) -> str | None:
        """Return the first monitored term contained in the message."""
        for term in self.monitored_terms:
            matches = term in message
            LOGGER.debug(f"Checking if monitored term matches: term={term!r} matches={matches}")
            if matches:
                return term
        return None

    def should_notify(self, event: ChatEvent) -> bool:
        # Never forward our own messages, they may be echoes of notifications.
        # Twitch logins are case-insensitive and IRC nicks arrive lowercased.
        if event.sender.lower() == self.identity.lower():
            return False

        LOGGER.debug(
            f"Received chat message: channel={event.channel} "
            f"sender={event.sender} text={event.message!r}"
        )

        in_channel = self.is_monitored_channel(event.channel)
        term = self.find_monitored_term(event.message)
        return in_channel or term is not None
