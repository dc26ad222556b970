"""High-level async client for a Signal K server."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from typing import Any

import aiohttp

from pysignalk._stream import AiohttpStreamRuntime, StreamEventHandler, StreamRuntime, StreamRuntimeFactory
from pysignalk._transport import AiohttpTransport, Transport
from pysignalk.api import SignalKApiClient
from pysignalk.config import SignalKConfig
from pysignalk.connection import ConnectionState, StreamConnection, build_api_base_url
from pysignalk.exceptions import SignalKConfigError, SignalKError
from pysignalk.models.discovery import DiscoveredService
from pysignalk.models.subscription import SubscriptionRequest
from pysignalk.models.value import SignalKValue
from pysignalk.state.store import ValueStore
from pysignalk.storage import JsonFileStorage, KeyValueStorage, MemoryStorage
from pysignalk.subscriptions import SubscriptionManager
from pysignalk.tokens import TokenStore

_logger = logging.getLogger(__name__)


class SignalKClient:
    """Async client combining the delta stream and the REST API.

    Usage::

        async with SignalKClient(SignalKConfig()) as client:
            await client.connect("demo.signalk.org", 80)
            await client.subscribe([SubscriptionRequest(path="navigation.*")])
            ...
            speed = client.get_value("navigation.speedOverGround")
    """

    def __init__(
        self,
        config: SignalKConfig | None = None,
        *,
        session: aiohttp.ClientSession | None = None,
        storage: KeyValueStorage | None = None,
        runtime_factory: StreamRuntimeFactory | None = None,
        transport: Transport | None = None,
    ) -> None:
        self._config = config or SignalKConfig()
        self._external_session = session is not None
        self._http_session = session
        self._runtime_factory = runtime_factory
        self._transport = transport
        self._background: set[asyncio.Task[Any]] = set()

        if storage is None:
            storage = JsonFileStorage(self._config.state_path) if self._config.state_path else MemoryStorage()

        self.store = ValueStore()
        self.subscriptions = SubscriptionManager()
        self.tokens = TokenStore(storage, prefix=self._config.storage_prefix)
        self._connection: StreamConnection | None = None
        self._api: SignalKApiClient | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> SignalKClient:
        if self._http_session is None and (self._transport is None or self._runtime_factory is None):
            self._http_session = aiohttp.ClientSession()

        transport = self._transport
        if transport is None:
            assert self._http_session is not None  # noqa: S101
            transport = AiohttpTransport(self._http_session, timeout=self._config.request_timeout)
        self._api = SignalKApiClient(transport, self.tokens, description=self._config.client_description)

        self._connection = StreamConnection(
            self._runtime_factory or self._default_runtime_factory,
            store=self.store,
            subscriptions=self.subscriptions,
            context=self._config.context,
            subscribe_all_on_connect=self._config.subscribe_all_on_connect,
            use_tls=self._config.use_tls,
            auth_token=self._config.auth_token,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if self._connection is not None:
            await self._connection.disconnect()
        for task in list(self._background):
            task.cancel()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)
        self._background.clear()
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None

    def _default_runtime_factory(self, on_event: StreamEventHandler) -> StreamRuntime:
        assert self._http_session is not None  # noqa: S101
        return AiohttpStreamRuntime(self._http_session, on_event, logger=_logger)

    def _require_connection(self) -> StreamConnection:
        if self._connection is None:
            raise SignalKError("Client not initialized. Use 'async with SignalKClient(...) as client:'")
        return self._connection

    def _require_api(self) -> SignalKApiClient:
        if self._api is None:
            raise SignalKError("Client not initialized. Use 'async with SignalKClient(...) as client:'")
        return self._api

    # ------------------------------------------------------------------
    # Stream
    # ------------------------------------------------------------------

    async def connect(self, host: str, port: int) -> str:
        """Open the stream and point the REST client at the same server."""
        connection = self._require_connection()
        api = self._require_api()
        url = await connection.connect(host, port)
        api.set_base_url(build_api_base_url(host, port, use_tls=connection.use_tls))

        task = asyncio.create_task(api.check_token_status())
        self._background.add(task)
        task.add_done_callback(self._background.discard)
        return url

    async def connect_to_service(self, service: DiscoveredService) -> str:
        if not service.is_resolved:
            raise SignalKConfigError(f"Service {service.name!r} has not been resolved yet")
        assert service.host is not None and service.port is not None  # noqa: S101
        return await self.connect(service.host, service.port)

    async def disconnect(self) -> None:
        await self._require_connection().disconnect()

    async def subscribe(self, requests: Iterable[SubscriptionRequest]) -> None:
        await self._require_connection().subscribe(requests)

    async def unsubscribe(self, paths: Iterable[str]) -> bool:
        return await self._require_connection().unsubscribe(paths)

    @property
    def state(self) -> ConnectionState:
        return self._require_connection().state

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and self._connection.is_connected

    @property
    def connected_host(self) -> str | None:
        return self._connection.connected_host if self._connection is not None else None

    @property
    def connected_port(self) -> int | None:
        return self._connection.connected_port if self._connection is not None else None

    @property
    def connection_url(self) -> str | None:
        return self._connection.connection_url if self._connection is not None else None

    @property
    def connection(self) -> StreamConnection:
        return self._require_connection()

    def get_value(self, path: str) -> SignalKValue | None:
        return self.store.get(path)

    @property
    def path_values(self) -> dict[str, SignalKValue]:
        return self.store.snapshot()

    # ------------------------------------------------------------------
    # REST
    # ------------------------------------------------------------------

    @property
    def api(self) -> SignalKApiClient:
        return self._require_api()

    async def get(self, path: str) -> bytes:
        return await self._require_api().get(path)

    async def put(self, path: str, data: bytes) -> None:
        await self._require_api().put(path, data)

    async def request_access_token(self, description: str | None = None) -> bool:
        return await self._require_api().request_access_token(description)

    @property
    def has_valid_token(self) -> bool:
        return self.tokens.token is not None

    @property
    def is_token_request_pending(self) -> bool:
        return self._api is not None and self._api.is_token_request_pending
