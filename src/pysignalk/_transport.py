"""HTTP transport for the REST control plane."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Protocol

import aiohttp

from pysignalk.exceptions import SignalKInvalidResponseError

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class HttpResponse:
    """Status and body of a completed HTTP exchange."""

    status: int
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return 200 <= self.status <= 299

    def json(self) -> Any:
        """Decode the body as JSON (raises ``ValueError`` on bad input)."""
        return json.loads(self.body)


class Transport(Protocol):
    """Structural transport interface used by the API client.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (:class:`AiohttpTransport`) concrete.
    """

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse: ...


def join_url(base_url: str, path: str) -> str:
    """Append *path* to *base_url*; absolute URLs are returned unchanged."""
    if "://" in path:
        return path
    if not path:
        return base_url
    return f"{base_url.rstrip('/')}/{path.lstrip('/')}"


class AiohttpTransport:
    """aiohttp-backed transport with a per-request total timeout."""

    def __init__(self, http_session: aiohttp.ClientSession, *, timeout: float = 10.0) -> None:
        self._http = http_session
        self._timeout = aiohttp.ClientTimeout(total=timeout)

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        _logger.debug("%s %s", method, url)
        try:
            async with self._http.request(
                method,
                url,
                headers=dict(headers or {}),
                data=body,
                timeout=self._timeout,
            ) as resp:
                payload = await resp.read()
                _logger.debug("%s %s -> %d (%d bytes)", method, url, resp.status, len(payload))
                return HttpResponse(status=resp.status, body=payload, headers=dict(resp.headers))
        except (aiohttp.ClientError, TimeoutError, OSError) as exc:
            raise SignalKInvalidResponseError(
                f"{method} {url} failed: {exc}",
                endpoint=url,
            ) from exc
