"""Delta message models (server -> client)."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from pysignalk.models._base import SignalKBaseModel
from pysignalk.models.value import SignalKValue


class DeltaValue(SignalKBaseModel):
    """One path/value pair inside an update.

    ``path`` is optional because some servers only put the path on the
    enclosing update.
    """

    path: str | None = None
    value: SignalKValue

    @field_validator("value", mode="before")
    @classmethod
    def _decode_value(cls, value: Any) -> SignalKValue:
        return SignalKValue.decode(value)


class DeltaUpdate(SignalKBaseModel):
    """A group of values sharing a source and timestamp.

    Parameters
    ----------
    path : str or None
        Update-level path, used for values that carry none of their own.
    values : list[DeltaValue]
        Ordered values.
    timestamp : str or None
        ISO-8601 timestamp reported by the server, kept verbatim.
    source_ref : str or None
        ``$source`` reference of the producing device.
    """

    path: str | None = None
    values: list[DeltaValue] = Field(default_factory=list)
    timestamp: str | None = None
    source_ref: str | None = Field(default=None, alias="$source")


class DeltaMessage(SignalKBaseModel):
    """A server-pushed delta for one context."""

    context: str | None = None
    updates: list[DeltaUpdate]
