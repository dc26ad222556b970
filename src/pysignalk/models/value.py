"""Typed Signal K values.

A delta value is one of a small set of JSON shapes.  Decoding tries each
variant in a fixed order (boolean, integer, floating point, string,
mapping of string to number) and takes the first that fits, so ``true``
never becomes ``1`` and ``"12.5"`` stays a string.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict


class ValueKind(StrEnum):
    NULL = "null"
    BOOL = "bool"
    INT = "int"
    FLOAT = "float"
    STRING = "string"
    MAPPING = "mapping"


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _parse_numeric_string(text: str) -> float | None:
    # float() also accepts surrounding whitespace and digit separators,
    # neither of which is a plain numeric literal.
    if not text or text != text.strip() or "_" in text:
        return None
    try:
        return float(text)
    except ValueError:
        return None


class SignalKValue(BaseModel):
    """Tagged value carried by a delta.

    Parameters
    ----------
    kind : ValueKind
        Which variant matched during decoding.
    data : Any
        The decoded Python value: ``None``, ``bool``, ``int``, ``float``,
        ``str`` or ``dict[str, float]``.
    """

    model_config = ConfigDict(frozen=True)

    kind: ValueKind
    data: Any = None

    @classmethod
    def decode(cls, raw: Any) -> SignalKValue:
        """Decode a JSON-parsed value.

        Raises
        ------
        ValueError
            If *raw* fits none of the supported variants (lists, nested
            objects, objects with non-numeric members).
        """
        if isinstance(raw, SignalKValue):
            return raw
        if raw is None:
            return cls(kind=ValueKind.NULL)
        if isinstance(raw, bool):
            return cls(kind=ValueKind.BOOL, data=raw)
        if isinstance(raw, int):
            return cls(kind=ValueKind.INT, data=raw)
        if isinstance(raw, float):
            return cls(kind=ValueKind.FLOAT, data=raw)
        if isinstance(raw, str):
            return cls(kind=ValueKind.STRING, data=raw)
        if isinstance(raw, dict) and all(isinstance(k, str) and _is_number(v) for k, v in raw.items()):
            return cls(kind=ValueKind.MAPPING, data={k: float(v) for k, v in raw.items()})
        raise ValueError(f"Unsupported Signal K value: {type(raw).__name__}")

    @property
    def is_null(self) -> bool:
        return self.kind is ValueKind.NULL

    def double_value(self) -> float | None:
        """Numeric view of the value.

        Floats and integers convert directly; strings convert when they
        hold a numeric literal.  Everything else returns ``None``.
        """
        if self.kind in (ValueKind.FLOAT, ValueKind.INT):
            return float(self.data)
        if self.kind is ValueKind.STRING:
            return _parse_numeric_string(self.data)
        return None

    def mapping_value(self) -> dict[str, float] | None:
        """Compound value (e.g. ``{"latitude": .., "longitude": ..}``)."""
        if self.kind is ValueKind.MAPPING:
            return dict(self.data)
        return None

    def __repr__(self) -> str:
        return f"SignalKValue({self.kind.value}={self.data!r})"
