"""Stream connection lifecycle and delta ingestion."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable, Iterable, Mapping
from enum import StrEnum
from typing import Any

from pysignalk._constants import DEFAULT_CONTEXT, STREAM_PATH, STREAM_SUBPROTOCOLS, TLS_PORTS
from pysignalk._redact import redact_token
from pysignalk._stream import StreamEvent, StreamEventType, StreamRuntime, StreamRuntimeFactory
from pysignalk.ingestion.delta import ingest_frame
from pysignalk.models.subscription import SubscriptionRequest
from pysignalk.state.store import ValueStore
from pysignalk.subscriptions import SubscriptionManager

_logger = logging.getLogger(__name__)

StateListener = Callable[["ConnectionState"], None]


class ConnectionState(StrEnum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


def is_secure_port(port: int, use_tls: bool | None = None) -> bool:
    """Explicit override first, then the well-known TLS ports."""
    if use_tls is not None:
        return use_tls
    return port in TLS_PORTS


def _format_host(host: str) -> str:
    if ":" in host and not host.startswith("["):
        return f"[{host}]"
    return host


def build_stream_url(
    host: str,
    port: int,
    *,
    use_tls: bool | None = None,
    subscribe_all: bool = True,
) -> str:
    """Stream URL with the ``subscribe`` hint query parameter."""
    scheme = "wss" if is_secure_port(port, use_tls) else "ws"
    hint = "all" if subscribe_all else "none"
    return f"{scheme}://{_format_host(host)}:{port}{STREAM_PATH}?subscribe={hint}"


def build_api_base_url(host: str, port: int, *, use_tls: bool | None = None) -> str:
    """REST base URL matching the stream URL (``wss`` -> ``https``)."""
    scheme = "https" if is_secure_port(port, use_tls) else "http"
    return f"{scheme}://{_format_host(host)}:{port}"


class StreamConnection:
    """Owns the duplex channel and feeds decoded deltas into a store.

    States move ``DISCONNECTED -> CONNECTING -> CONNECTED`` and back to
    ``DISCONNECTED`` (or ``ERROR``) when the channel closes.  No automatic
    reconnect is attempted; callers decide when to call :meth:`connect`
    again.

    Parameters
    ----------
    runtime_factory : callable
        Builds a :class:`~pysignalk._stream.StreamRuntime` bound to an
        event handler.  Called once per :meth:`connect`.
    store : ValueStore
        Destination for decoded values.
    subscriptions : SubscriptionManager
        Queue flushed whenever the channel comes up.
    context : str
        Context used in control messages.
    subscribe_all_on_connect : bool
        Selects the ``subscribe=all``/``subscribe=none`` URL hint.
    use_tls : bool or None
        Explicit TLS override; ``None`` uses the port heuristic.
    auth_token : str or None
        Bearer token sent with the handshake.
    """

    def __init__(
        self,
        runtime_factory: StreamRuntimeFactory,
        *,
        store: ValueStore,
        subscriptions: SubscriptionManager,
        context: str = DEFAULT_CONTEXT,
        subscribe_all_on_connect: bool = True,
        use_tls: bool | None = None,
        auth_token: str | None = None,
    ) -> None:
        self._runtime_factory = runtime_factory
        self._store = store
        self._subscriptions = subscriptions
        self.context = context
        self.subscribe_all_on_connect = subscribe_all_on_connect
        self.use_tls = use_tls
        self.auth_token = auth_token

        self._runtime: StreamRuntime | None = None
        self._state = ConnectionState.DISCONNECTED
        self._connected_host: str | None = None
        self._connected_port: int | None = None
        self._connection_url: str | None = None
        self._last_error: BaseException | str | None = None
        self._state_listeners: list[StateListener] = []

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def is_connected(self) -> bool:
        return self._state is ConnectionState.CONNECTED

    @property
    def connected_host(self) -> str | None:
        return self._connected_host

    @property
    def connected_port(self) -> int | None:
        return self._connected_port

    @property
    def connection_url(self) -> str | None:
        return self._connection_url

    @property
    def last_error(self) -> BaseException | str | None:
        return self._last_error

    def add_state_listener(self, listener: StateListener) -> Callable[[], None]:
        """Call *listener* on every state change; returns a remover."""
        self._state_listeners.append(listener)

        def _remove() -> None:
            if listener in self._state_listeners:
                self._state_listeners.remove(listener)

        return _remove

    def _set_state(self, state: ConnectionState) -> None:
        if state is self._state:
            return
        _logger.debug("Stream state %s -> %s", self._state, state)
        self._state = state
        for listener in list(self._state_listeners):
            try:
                listener(state)
            except Exception:
                _logger.debug("State listener failed", exc_info=True)

    def _clear_connection_info(self) -> None:
        self._connected_host = None
        self._connected_port = None
        self._connection_url = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self, host: str, port: int) -> str:
        """Open the stream to *host*:*port*; returns the URL used.

        Any existing channel is closed first.  The call returns once the
        runtime has been started; the ``CONNECTED`` state follows when the
        handshake completes.
        """
        await self._stop_runtime()

        url = build_stream_url(
            host,
            port,
            use_tls=self.use_tls,
            subscribe_all=self.subscribe_all_on_connect,
        )
        headers: dict[str, str] = {}
        if self.auth_token:
            headers["Authorization"] = f"Bearer {self.auth_token}"

        self._connected_host = host
        self._connected_port = port
        self._connection_url = url
        self._last_error = None

        runtime: StreamRuntime | None = None

        async def _on_event(event: StreamEvent) -> None:
            # Late events from a replaced runtime must not touch current state.
            if runtime is None or runtime is not self._runtime:
                return
            await self._handle_event(event)

        runtime = self._runtime_factory(_on_event)
        self._runtime = runtime
        self._set_state(ConnectionState.CONNECTING)
        _logger.debug("Connecting stream url=%s auth=%s", url, redact_token(self.auth_token))
        await runtime.start(url, headers=headers, protocols=STREAM_SUBPROTOCOLS)
        return url

    async def disconnect(self) -> None:
        """Close the stream and forget the connection details."""
        self._clear_connection_info()
        self._set_state(ConnectionState.DISCONNECTED)
        await self._stop_runtime()

    async def _stop_runtime(self) -> None:
        runtime = self._runtime
        self._runtime = None
        if runtime is not None:
            await runtime.stop()

    async def _handle_event(self, event: StreamEvent) -> None:
        if event.type is StreamEventType.CONNECTED:
            self._set_state(ConnectionState.CONNECTED)
            await self._subscriptions.flush_if_connected(self)
        elif event.type is StreamEventType.TEXT:
            if event.payload is not None:
                ingest_frame(self._store.apply, event.payload)
        elif event.type in (StreamEventType.DISCONNECTED, StreamEventType.CANCELLED):
            _logger.debug("Stream closed type=%s reason=%s", event.type, event.reason)
            self._runtime = None
            self._clear_connection_info()
            self._set_state(ConnectionState.DISCONNECTED)
        elif event.type is StreamEventType.ERROR:
            _logger.debug("Stream error: %s", event.reason)
            self._runtime = None
            self._last_error = event.error if event.error is not None else event.reason
            self._clear_connection_info()
            self._set_state(ConnectionState.ERROR)

    # ------------------------------------------------------------------
    # Outbound
    # ------------------------------------------------------------------

    async def send_message(self, message: Mapping[str, Any]) -> bool:
        """Send a control message as compact JSON text."""
        runtime = self._runtime
        if runtime is None or not self.is_connected:
            return False
        return await runtime.send_text(json.dumps(message, separators=(",", ":")))

    async def subscribe(self, requests: Iterable[SubscriptionRequest]) -> None:
        """Queue *requests* and send them now if the stream is up."""
        self._subscriptions.enqueue(requests)
        await self._subscriptions.flush_if_connected(self)

    async def unsubscribe(self, paths: Iterable[str]) -> bool:
        return await self._subscriptions.unsubscribe(paths, self)
