"""Helpers for safe debug logging.

Access tokens and client identifiers travel through the REST control plane
and the stream handshake.  This module redacts them before anything is
emitted at DEBUG level.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "token",
        "accesstoken",
        "authorization",
        "clientid",
    }
)


def redact_token(token: str | None) -> str:
    """Short, non-reversible rendering of a bearer token."""
    if not token:
        return "<none>"
    return f"<token:{len(token)}c>"


def redact_for_log(value: Any) -> Any:
    """Copy of a decoded JSON value with credential fields masked."""
    if isinstance(value, Mapping):
        return {
            key: "<redacted>" if str(key).lower() in _SENSITIVE_VALUE_KEYS else redact_for_log(item)
            for key, item in value.items()
        }
    if isinstance(value, list):
        return [redact_for_log(item) for item in value]
    return value
