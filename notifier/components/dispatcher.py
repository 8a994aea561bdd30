"""IFTTT webhook dispatcher.

Each qualifying chat message gets its own POST. Calls are fire-and-forget:
failures are logged and dropped, never retried and never raised.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from types import TracebackType

import httpx

from notifier.core.config import Settings
from notifier.models import NotificationPayload

LOGGER: logging.Logger = logging.getLogger("Dispatcher")


@dataclass(frozen=True)
class DispatchResult:
    ok: bool
    status_code: int | None = None
    error: str | None = None


class NotificationDispatcher:
    """Posts notification payloads to the IFTTT Maker webhook."""

    def __init__(self, settings: Settings, *, client: httpx.AsyncClient | None = None) -> None:
        self.url = settings.webhook_url
        self._client = client
        self._owns_client = client is None
        self._tasks: set[asyncio.Task[None]] = set()

    async def __aenter__(self) -> NotificationDispatcher:
        if self._client is None:
            self._client = httpx.AsyncClient()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.close()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    async def send(self, payload: NotificationPayload) -> DispatchResult:
        """POST a single payload and report the outcome."""
        client = self._client or httpx.AsyncClient()
        try:
            resp = await client.post(
                self.url,
                content=payload.to_json().encode("utf-8"),
                headers={"Content-Type": "application/json"},
            )
            resp.raise_for_status()
            return DispatchResult(ok=True, status_code=resp.status_code)
        except httpx.HTTPStatusError as e:
            return DispatchResult(ok=False, status_code=e.response.status_code, error=str(e))
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            return DispatchResult(ok=False, error=f"{type(e).__name__}: {e}")
        finally:
            if client is not self._client:
                await client.aclose()

    async def dispatch(self, payload: NotificationPayload) -> None:
        result = await self.send(payload)
        if result.ok:
            LOGGER.debug(
                f"Notification sent: channel={payload.channel} status={result.status_code}"
            )
        else:
            LOGGER.error(
                f"Couldn't send IFTTT notification: channel={payload.channel} "
                f"sender={payload.sender} err={result.error}"
            )

    def schedule(self, payload: NotificationPayload) -> asyncio.Task[None]:
        """Start a dispatch in the background without waiting for it."""
        task = asyncio.create_task(self.dispatch(payload))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def close(self) -> None:
        """Abandon in-flight dispatches and release the HTTP client."""
        for task in list(self._tasks):
            task.cancel()
        self._tasks.clear()

        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
