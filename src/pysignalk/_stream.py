"""Internal duplex stream runtime and event types."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

import aiohttp

from pysignalk._constants import STREAM_SUBPROTOCOLS


class StreamEventType(StrEnum):
    CONNECTED = "connected"
    TEXT = "text"
    DISCONNECTED = "disconnected"
    CANCELLED = "cancelled"
    ERROR = "error"


@dataclass(frozen=True)
class StreamEvent:
    """Normalized event emitted by a stream runtime."""

    type: StreamEventType
    payload: str | None = None
    reason: str | None = None
    code: int | None = None
    error: BaseException | None = None


StreamEventHandler = Callable[[StreamEvent], Awaitable[None]]


class StreamRuntime(Protocol):
    """Duplex channel the connection drives.

    Implementations deliver events to the handler they were created with,
    one at a time and in arrival order.
    """

    @property
    def is_running(self) -> bool: ...

    async def start(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        protocols: Sequence[str] = STREAM_SUBPROTOCOLS,
    ) -> None: ...

    async def send_text(self, payload: str) -> bool: ...

    async def stop(self) -> None: ...


StreamRuntimeFactory = Callable[[StreamEventHandler], StreamRuntime]


class AiohttpStreamRuntime:
    """aiohttp websocket runtime that feeds events to an async handler."""

    def __init__(
        self,
        http_session: aiohttp.ClientSession,
        on_event: StreamEventHandler,
        *,
        heartbeat: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._http = http_session
        self._on_event = on_event
        self._heartbeat = heartbeat
        self._logger = logger or logging.getLogger(__name__)
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self._task: asyncio.Task[None] | None = None
        self._running = False
        self._stopping = False

    @property
    def is_running(self) -> bool:
        """Whether the reader task is alive."""
        return self._running

    async def start(
        self,
        url: str,
        *,
        headers: Mapping[str, str],
        protocols: Sequence[str] = STREAM_SUBPROTOCOLS,
    ) -> None:
        """Open the channel in the background; events report the outcome."""
        await self.stop()
        self._stopping = False
        self._running = True
        self._logger.debug("Stream runtime start requested url=%s", url)
        self._task = asyncio.create_task(self._run(url, dict(headers), tuple(protocols)))

    async def _emit(self, event: StreamEvent) -> None:
        try:
            await self._on_event(event)
        except Exception:
            self._logger.debug("Stream event handler failed for %s", event.type, exc_info=True)

    async def _run(self, url: str, headers: dict[str, str], protocols: tuple[str, ...]) -> None:
        try:
            try:
                ws = await self._http.ws_connect(
                    url,
                    headers=headers,
                    protocols=protocols,
                    heartbeat=self._heartbeat,
                )
            except (aiohttp.ClientError, TimeoutError, OSError) as exc:
                self._logger.debug("Stream connect failed: %s", exc)
                await self._emit(StreamEvent(StreamEventType.ERROR, reason=str(exc), error=exc))
                return

            self._ws = ws
            await self._emit(StreamEvent(StreamEventType.CONNECTED))

            async for msg in ws:
                if msg.type == aiohttp.WSMsgType.TEXT:
                    await self._emit(StreamEvent(StreamEventType.TEXT, payload=msg.data))
                elif msg.type == aiohttp.WSMsgType.BINARY:
                    try:
                        text = msg.data.decode("utf-8")
                    except UnicodeDecodeError:
                        self._logger.debug("Dropping non UTF-8 binary frame (%d bytes)", len(msg.data))
                        continue
                    await self._emit(StreamEvent(StreamEventType.TEXT, payload=text))
                elif msg.type == aiohttp.WSMsgType.ERROR:
                    exc = ws.exception()
                    await self._emit(StreamEvent(StreamEventType.ERROR, reason=str(exc), error=exc))
                    return

            if not self._stopping:
                await self._emit(
                    StreamEvent(
                        StreamEventType.DISCONNECTED,
                        reason=str(ws.close_code),
                        code=ws.close_code,
                    )
                )
        except asyncio.CancelledError:
            # stop() cancels too; only report cancellations it did not ask for.
            if not self._stopping:
                await self._emit(StreamEvent(StreamEventType.CANCELLED))
            raise
        finally:
            self._running = False
            ws_ref = self._ws
            self._ws = None
            if ws_ref is not None and not ws_ref.closed:
                with contextlib.suppress(Exception):
                    await ws_ref.close()

    async def send_text(self, payload: str) -> bool:
        ws = self._ws
        if ws is None or ws.closed:
            return False
        try:
            await ws.send_str(payload)
        except (aiohttp.ClientError, ConnectionError, RuntimeError):
            self._logger.debug("Stream send failed", exc_info=True)
            return False
        return True

    async def stop(self) -> None:
        """Close the channel and wait for the reader task to finish."""
        task = self._task
        self._task = None
        if task is None:
            return
        self._stopping = True
        ws = self._ws
        if ws is not None and not ws.closed:
            with contextlib.suppress(Exception):
                await ws.close()
        if not task.done():
            task.cancel()
        if task is asyncio.current_task():
            # Stopped from inside an event handler; the reader unwinds on return.
            return
        with contextlib.suppress(asyncio.CancelledError):
            await task
        self._running = False
        self._logger.debug("Stream runtime stopped")
