"""Latest-value store keyed by normalized path."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from pysignalk.models.value import SignalKValue
from pysignalk.state.events import ValueUpdate

_logger = logging.getLogger(__name__)

ValueListener = Callable[[ValueUpdate], None]


class ValueStore:
    """In-memory map from path to last-known value.

    Each update is written under both its absolute and its relative path.
    Later writes overwrite earlier ones unconditionally; no history is
    kept.  Reads and writes are guarded by a lock so the store can be read
    from threads other than the event loop.
    """

    def __init__(self) -> None:
        self._values: dict[str, SignalKValue] = {}
        self._lock = threading.Lock()
        self._listeners: list[ValueListener] = []

    def apply(self, update: ValueUpdate) -> None:
        """Store *update* under both of its keys and notify listeners."""
        with self._lock:
            self._values[update.absolute_path] = update.value
            self._values[update.relative_path] = update.value
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(update)
            except Exception:
                _logger.debug("Value listener failed for path=%s", update.relative_path, exc_info=True)

    def set(self, path: str, value: SignalKValue) -> None:
        """Store a value under a single key without notifying listeners."""
        with self._lock:
            self._values[path] = value

    def get(self, path: str) -> SignalKValue | None:
        with self._lock:
            return self._values.get(path)

    def get_double(self, path: str) -> float | None:
        """Numeric view of the value at *path*, or ``None``."""
        value = self.get(path)
        return value.double_value() if value is not None else None

    def snapshot(self) -> dict[str, SignalKValue]:
        """Copy of the whole store."""
        with self._lock:
            return dict(self._values)

    def paths(self) -> list[str]:
        with self._lock:
            return sorted(self._values)

    def clear(self) -> None:
        with self._lock:
            self._values.clear()

    def add_listener(self, listener: ValueListener) -> Callable[[], None]:
        """Call *listener* for every applied update.

        Returns a zero-argument function that removes the listener.
        """
        with self._lock:
            self._listeners.append(listener)

        def _remove() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return _remove

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._values

    def __len__(self) -> int:
        with self._lock:
            return len(self._values)
