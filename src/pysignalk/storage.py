"""Persisted key-value storage used for token state.

Token persistence only needs ``get``/``set``/``remove`` over string and
boolean values, so any backend that offers those can be plugged in.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Protocol

_logger = logging.getLogger(__name__)

StoredValue = str | bool


class KeyValueStorage(Protocol):
    """Minimal storage capability consumed by :class:`~pysignalk.tokens.TokenStore`."""

    def get_string(self, key: str) -> str | None: ...

    def get_bool(self, key: str) -> bool: ...

    def set(self, key: str, value: StoredValue) -> None: ...

    def remove(self, key: str) -> None: ...


def _as_string(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in {"1", "true", "yes"}
    return False


class MemoryStorage:
    """Process-local storage; state is lost when the process exits."""

    def __init__(self, initial: dict[str, StoredValue] | None = None) -> None:
        self._data: dict[str, StoredValue] = dict(initial or {})
        self._lock = threading.Lock()

    def get_string(self, key: str) -> str | None:
        with self._lock:
            return _as_string(self._data.get(key))

    def get_bool(self, key: str) -> bool:
        with self._lock:
            return _as_bool(self._data.get(key))

    def set(self, key: str, value: StoredValue) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def items(self) -> dict[str, StoredValue]:
        with self._lock:
            return dict(self._data)


class JsonFileStorage:
    """Storage backed by a single JSON object on disk.

    The file is read on first access and rewritten atomically after every
    mutation.  A missing or unreadable file is treated as empty.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)
        self._lock = threading.Lock()
        self._data: dict[str, StoredValue] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, StoredValue]:
        if self._data is not None:
            return self._data
        data: dict[str, StoredValue] = {}
        try:
            raw = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raw = {}
        except (OSError, ValueError):
            _logger.debug("Ignoring unreadable state file %s", self._path, exc_info=True)
            raw = {}
        if isinstance(raw, dict):
            for key, value in raw.items():
                if isinstance(key, str) and isinstance(value, (str, bool)):
                    data[key] = value
        self._data = data
        return data

    def _flush(self, data: dict[str, StoredValue]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def get_string(self, key: str) -> str | None:
        with self._lock:
            return _as_string(self._load().get(key))

    def get_bool(self, key: str) -> bool:
        with self._lock:
            return _as_bool(self._load().get(key))

    def set(self, key: str, value: StoredValue) -> None:
        with self._lock:
            data = self._load()
            if data.get(key) == value:
                return
            data[key] = value
            self._flush(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key not in data:
                return
            del data[key]
            self._flush(data)


class MirroredStorage:
    """Fan writes out to several backends; read from the first that has a value.

    The primary is usually local; mirrors are synchronized copies (for
    example a store shared across a user's devices).  Values found only on
    a mirror are copied back into the primary.
    """

    def __init__(self, primary: KeyValueStorage, *mirrors: KeyValueStorage) -> None:
        self._primary = primary
        self._mirrors = mirrors

    def get_string(self, key: str) -> str | None:
        value = self._primary.get_string(key)
        if value is not None:
            return value
        for mirror in self._mirrors:
            value = mirror.get_string(key)
            if value is not None:
                self._primary.set(key, value)
                return value
        return None

    def get_bool(self, key: str) -> bool:
        if self._primary.get_bool(key):
            return True
        for mirror in self._mirrors:
            if mirror.get_bool(key):
                self._primary.set(key, True)
                return True
        return False

    def set(self, key: str, value: StoredValue) -> None:
        self._primary.set(key, value)
        for mirror in self._mirrors:
            mirror.set(key, value)

    def remove(self, key: str) -> None:
        self._primary.remove(key)
        for mirror in self._mirrors:
            mirror.remove(key)
