from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import pytest

from pysignalk._stream import StreamEvent, StreamEventHandler, StreamEventType
from pysignalk._transport import HttpResponse


class FakeStreamRuntime:
    """Records outbound frames; tests push events through ``emit``."""

    def __init__(self, on_event: StreamEventHandler, *, send_ok: bool = True) -> None:
        self.on_event = on_event
        self.send_ok = send_ok
        self.sent: list[str] = []
        self.started_with: tuple[str, dict[str, str], tuple[str, ...]] | None = None
        self.stopped = False
        self._running = False

    @property
    def is_running(self) -> bool:
        return self._running

    async def start(self, url: str, *, headers: Mapping[str, str], protocols: Sequence[str] = ()) -> None:
        self.started_with = (url, dict(headers), tuple(protocols))
        self._running = True

    async def send_text(self, payload: str) -> bool:
        if not self.send_ok:
            return False
        self.sent.append(payload)
        return True

    async def stop(self) -> None:
        self.stopped = True
        self._running = False

    async def emit(self, event_type: StreamEventType, **kwargs: Any) -> None:
        await self.on_event(StreamEvent(event_type, **kwargs))

    def sent_json(self) -> list[dict[str, Any]]:
        return [json.loads(frame) for frame in self.sent]


@dataclass
class RuntimeRecorder:
    runtimes: list[FakeStreamRuntime] = field(default_factory=list)

    def __call__(self, on_event: StreamEventHandler) -> FakeStreamRuntime:
        runtime = FakeStreamRuntime(on_event)
        self.runtimes.append(runtime)
        return runtime

    @property
    def latest(self) -> FakeStreamRuntime:
        return self.runtimes[-1]


@dataclass
class RecordedRequest:
    method: str
    url: str
    headers: dict[str, str]
    body: bytes | None


@dataclass
class FakeTransport:
    """Scripted HTTP transport.

    ``routes`` maps ``(method, url)`` to a list of responses consumed in
    order; the last one repeats.  A response may be an exception instance,
    which is raised instead.
    """

    routes: dict[tuple[str, str], list[HttpResponse | Exception]] = field(default_factory=dict)
    requests: list[RecordedRequest] = field(default_factory=list)

    def add(self, method: str, url: str, *responses: HttpResponse | Exception) -> None:
        self.routes.setdefault((method, url), []).extend(responses)

    async def request(
        self,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        body: bytes | None = None,
    ) -> HttpResponse:
        self.requests.append(RecordedRequest(method, url, dict(headers or {}), body))
        queue = self.routes.get((method, url))
        if not queue:
            raise AssertionError(f"Unexpected request in fake transport: {method} {url}")
        response = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(response, Exception):
            raise response
        return response

    def calls(self, method: str | None = None, url: str | None = None) -> list[RecordedRequest]:
        return [
            r for r in self.requests if (method is None or r.method == method) and (url is None or r.url == url)
        ]


def json_response(status: int, payload: Any) -> HttpResponse:
    return HttpResponse(status=status, body=json.dumps(payload).encode("utf-8"))


@pytest.fixture
def runtimes() -> RuntimeRecorder:
    return RuntimeRecorder()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()
