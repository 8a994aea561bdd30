"""Twitch chat bot: connection lifecycle and message routing."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any

import aiohttp

from notifier.components import MessageFilter, NotificationDispatcher
from notifier.core.config import Settings
from notifier.core.irc import IRCMessage, format_password, normalize_channel, parse_line
from notifier.models import ChatEvent, NotificationPayload

LOGGER: logging.Logger = logging.getLogger("Bot")

TWITCH_IRC_HOST = "irc-ws.chat.twitch.tv"
TWITCH_IRC_PORT = 443

# Reconnect delay: 1s, growing 1.5x per attempt, capped at 30s
RECONNECT_INTERVAL = 1.0
RECONNECT_DECAY = 1.5
MAX_RECONNECT_INTERVAL = 30.0
WS_HEARTBEAT = 60.0

# Twitch accepts any password for justinfan logins
ANONYMOUS_PASSWORD = "SCHMOOPIIE"

_LOGIN_FAILURES = (
    "Login authentication failed",
    "Login unsuccessful",
    "Improperly formatted auth",
    "Invalid NICK",
)


class ChatConnectionError(ConnectionError):
    """Raised when no chat connection could ever be established."""


class LifecycleState(Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    TERMINATING = "terminating"


_TRANSITIONS: dict[LifecycleState, frozenset[LifecycleState]] = {
    LifecycleState.DISCONNECTED: frozenset(
        {LifecycleState.CONNECTING, LifecycleState.TERMINATING}
    ),
    LifecycleState.CONNECTING: frozenset(
        {LifecycleState.CONNECTED, LifecycleState.DISCONNECTED}
    ),
    LifecycleState.CONNECTED: frozenset({LifecycleState.DISCONNECTED}),
    LifecycleState.TERMINATING: frozenset(),
}


@dataclass(frozen=True)
class SessionEnd:
    reason: str
    retry: bool = True


class ChatBot:
    def __init__(
        self,
        settings: Settings,
        *,
        message_filter: MessageFilter | None = None,
        dispatcher: NotificationDispatcher | None = None,
        host: str = TWITCH_IRC_HOST,
        port: int = TWITCH_IRC_PORT,
        secure: bool = True,
    ) -> None:
        self.settings = settings
        self.message_filter = message_filter or MessageFilter(settings)
        self.dispatcher = dispatcher or NotificationDispatcher(settings)
        self.host = host
        self.port = port
        self.secure = secure
        self.state = LifecycleState.DISCONNECTED
        self._ever_connected = False
        self._session_connected = False
        self._ws: aiohttp.ClientWebSocketResponse | None = None

    @property
    def url(self) -> str:
        scheme = "wss" if self.secure else "ws"
        return f"{scheme}://{self.host}:{self.port}"

    def _transition(self, new_state: LifecycleState) -> None:
        if new_state not in _TRANSITIONS[self.state]:
            raise RuntimeError(
                f"Invalid lifecycle transition: {self.state.value} -> {new_state.value}"
            )
        if new_state is LifecycleState.TERMINATING and not self._ever_connected:
            raise RuntimeError("Cannot terminate a bot that never connected")
        LOGGER.debug(f"Lifecycle: {self.state.value} -> {new_state.value}")
        self.state = new_state

    async def start(self) -> int:
        """Connect and process chat until the connection is lost for good.

        Returns the process exit code. Raises ChatConnectionError if the
        first connection never succeeds.
        """
        max_attempts = self.settings.max_reconnect_attempts
        async with self.dispatcher, aiohttp.ClientSession() as session:
            attempts = 0
            delay = RECONNECT_INTERVAL
            while True:
                end = await self._run_session(session)

                if self._session_connected:
                    attempts = 0
                    delay = RECONNECT_INTERVAL

                if not end.retry or attempts >= max_attempts:
                    break

                attempts += 1
                LOGGER.warning(
                    f"Connection lost ({end.reason}), reconnecting in {delay:.1f}s "
                    f"(attempt {attempts}/{max_attempts})"
                )
                await asyncio.sleep(delay)
                delay = min(delay * RECONNECT_DECAY, MAX_RECONNECT_INTERVAL)

            if not self._ever_connected:
                raise ChatConnectionError(f"Could not connect to {self.url}: {end.reason}")

            return self.on_disconnected(end.reason)

    async def _run_session(self, session: aiohttp.ClientSession) -> SessionEnd:
        """Run one websocket session until it closes."""
        self._transition(LifecycleState.CONNECTING)
        self._session_connected = False
        try:
            async with session.ws_connect(self.url, heartbeat=WS_HEARTBEAT) as ws:
                self._ws = ws
                await self._login()

                async for msg in ws:
                    if msg.type == aiohttp.WSMsgType.TEXT:
                        for line in msg.data.split("\r\n"):
                            end = await self.handle_line(line)
                            if end is not None:
                                return end
                    elif msg.type == aiohttp.WSMsgType.ERROR:
                        return SessionEnd(f"websocket error: {ws.exception()}")

                return SessionEnd(f"connection closed (code={ws.close_code})")
        except (aiohttp.ClientError, ConnectionResetError, asyncio.TimeoutError) as e:
            return SessionEnd(f"{type(e).__name__}: {e}")
        finally:
            self._ws = None
            self._transition(LifecycleState.DISCONNECTED)

    async def _send(self, line: str) -> None:
        if self._ws is None:
            raise RuntimeError("Not connected to chat")
        if not line.startswith("PASS "):
            LOGGER.debug(f"> {line}")
        await self._ws.send_str(line)

    async def _login(self) -> None:
        secret = self.settings.auth_secret
        password = format_password(secret) if secret else ANONYMOUS_PASSWORD

        await self._send("CAP REQ :twitch.tv/tags twitch.tv/commands")
        await self._send(f"PASS {password}")
        await self._send(f"NICK {self.settings.identity.lower()}")

    async def _join_channels(self) -> None:
        channels = ",".join(normalize_channel(name) for name in self.settings.join_channels)
        await self._send(f"JOIN {channels}")

    async def handle_line(self, line: str) -> SessionEnd | None:
        """Handle one raw IRC line. Returns a SessionEnd when the session must close."""
        message = parse_line(line)
        if message is None:
            return None

        command = message.command
        if command == "PING":
            await self._send(f"PONG :{message.trailing}")
        elif command == "001":
            await self._join_channels()
            self.on_connected(self.host, self.port)
        elif command == "PRIVMSG":
            self._handle_privmsg(message)
        elif command == "RECONNECT":
            return SessionEnd("server requested reconnect")
        elif command == "NOTICE" and any(text in message.trailing for text in _LOGIN_FAILURES):
            return SessionEnd(message.trailing, retry=False)
        return None

    def _handle_privmsg(self, message: IRCMessage) -> None:
        if message.is_action():
            LOGGER.debug(f"Ignoring action message: {message.raw}")
            return

        username = message.nick or ""
        userstate: dict[str, Any] = {**message.tags, "username": username}
        channel = message.params[0] if len(message.params) > 1 else ""
        is_self = username == self.settings.identity.lower()
        self.on_chat(channel, userstate, message.trailing, is_self)

    def on_connected(self, address: str, port: int) -> None:
        self._transition(LifecycleState.CONNECTED)
        self._ever_connected = True
        self._session_connected = True
        LOGGER.info(f"Connected to twitch: endpoint={address}:{port}")

    def on_disconnected(self, reason: str) -> int:
        LOGGER.info(f"Disconnected: reason={reason}")
        self._transition(LifecycleState.TERMINATING)
        return 1

    def on_chat(
        self, channel: str, userstate: dict[str, Any], message: str, is_self: bool
    ) -> asyncio.Task[None] | None:
        event = ChatEvent(
            channel=channel,
            sender=userstate.get("username", ""),
            message=message,
            is_self=is_self,
        )
        if not self.message_filter.should_notify(event):
            return None

        LOGGER.info(
            f"Sending notification for chat message: channel={event.channel} "
            f"sender={event.sender} text={event.message!r}"
        )
        return self.dispatcher.schedule(NotificationPayload.from_event(event))
