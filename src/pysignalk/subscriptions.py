"""Subscription queue and control-message serialization."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Protocol

from pysignalk.models.subscription import SubscriptionRequest

_logger = logging.getLogger(__name__)


class ControlChannel(Protocol):
    """What the manager needs from a live connection."""

    @property
    def is_connected(self) -> bool: ...

    @property
    def context(self) -> str: ...

    async def send_message(self, message: Mapping[str, Any]) -> bool: ...


def build_subscribe_message(context: str, requests: Iterable[SubscriptionRequest]) -> dict[str, Any]:
    return {
        "context": context,
        "subscribe": [request.to_message() for request in requests],
    }


def build_unsubscribe_message(context: str, paths: Iterable[str]) -> dict[str, Any]:
    return {
        "context": context,
        "unsubscribe": [{"path": path} for path in paths],
    }


class SubscriptionManager:
    """Owns the queue of subscriptions waiting to be sent.

    Requests are kept in order, duplicates included; the server treats a
    repeated subscribe as a no-op.  The queue empties once it has been
    flushed, and the server forgets subscriptions when the connection
    drops, so callers re-enqueue after a reconnect.
    """

    def __init__(self) -> None:
        self._pending: list[SubscriptionRequest] = []

    @property
    def pending(self) -> list[SubscriptionRequest]:
        return list(self._pending)

    def enqueue(self, requests: Iterable[SubscriptionRequest]) -> None:
        self._pending.extend(requests)

    def clear(self) -> None:
        self._pending.clear()

    async def flush_if_connected(self, connection: ControlChannel) -> bool:
        """Send the whole pending queue as one subscribe message.

        Returns ``True`` when a message was sent.  The queue is left as is
        when the connection is down or the send fails.
        """
        if not connection.is_connected or not self._pending:
            return False

        batch = list(self._pending)
        message = build_subscribe_message(connection.context, batch)
        if not await connection.send_message(message):
            _logger.debug("Subscribe flush failed; keeping %d pending request(s)", len(batch))
            return False

        # Requests enqueued while the send was in flight stay queued.
        del self._pending[: len(batch)]
        _logger.debug("Flushed %d subscription(s)", len(batch))
        return True

    async def unsubscribe(self, paths: Iterable[str], connection: ControlChannel) -> bool:
        """Ask the server to stop streaming *paths*.

        Requires a live connection and at least one path.  Pending,
        not-yet-flushed subscriptions are left untouched.
        """
        path_list = list(paths)
        if not connection.is_connected or not path_list:
            return False
        return await connection.send_message(build_unsubscribe_message(connection.context, path_list))
