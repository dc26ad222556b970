"""Delta ingestion.

This module turns raw stream frames into :class:`ValueUpdate` events:

- decode the frame into a :class:`DeltaMessage`
- resolve each value's absolute and relative path
- apply the resulting events to a store

A frame that cannot be decoded is dropped as a whole; one bad frame never
ends the session.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable

from pydantic import ValidationError

from pysignalk.models.delta import DeltaMessage
from pysignalk.paths import resolve_path
from pysignalk.state.events import ValueUpdate

_logger = logging.getLogger(__name__)


def decode_delta(frame: str | bytes) -> DeltaMessage | None:
    """Decode one text frame, returning ``None`` if it is not a delta."""
    try:
        payload = json.loads(frame)
        return DeltaMessage.model_validate(payload)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as exc:
        _logger.debug("Dropping undecodable frame: %s", type(exc).__name__)
        return None


def build_value_updates(delta: DeltaMessage) -> list[ValueUpdate]:
    """Resolve every value in *delta* into a store update.

    Values with neither a value-level nor an update-level path are skipped.
    """
    updates: list[ValueUpdate] = []
    for update in delta.updates:
        for item in update.values:
            resolved = resolve_path(delta.context, update.path, item.path)
            if resolved is None:
                continue
            updates.append(
                ValueUpdate(
                    absolute_path=resolved.absolute,
                    relative_path=resolved.relative,
                    value=item.value,
                    context=delta.context,
                    timestamp=update.timestamp,
                )
            )
    return updates


def ingest_frame(store_apply: Callable[[ValueUpdate], None], frame: str | bytes) -> list[ValueUpdate]:
    """Decode *frame* and apply its updates; returns what was applied."""
    delta = decode_delta(frame)
    if delta is None:
        return []
    updates = build_value_updates(delta)
    for update in updates:
        store_apply(update)
    return updates
