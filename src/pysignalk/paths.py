"""Path normalization across absolute and relative addressing.

Servers are inconsistent about whether delta paths are qualified with the
context (``vessels.self.navigation.speedOverGround``) or bare
(``navigation.speedOverGround``).  Every value is therefore stored under
both forms so lookups work whichever one the caller uses.
"""

from __future__ import annotations

from typing import NamedTuple

from pysignalk._constants import VESSELS_PREFIX


class ResolvedPath(NamedTuple):
    absolute: str
    relative: str


def _strip_vessel_prefix(path: str) -> str:
    """Drop a leading ``vessels.<id>.`` when present."""
    remainder = path[len(VESSELS_PREFIX):]
    _, dot, tail = remainder.partition(".")
    return tail if dot else path


def resolve_path(
    context: str | None,
    update_path: str | None,
    value_path: str | None,
) -> ResolvedPath | None:
    """Compute the absolute and relative store keys for one delta value.

    The value-level path wins over the update-level one.  Returns ``None``
    when neither is present; such values cannot be stored.
    """
    raw_path = value_path if value_path is not None else update_path
    if raw_path is None:
        return None

    prefix = f"{context}." if context else None

    if prefix is not None and not raw_path.startswith(prefix):
        absolute = prefix + raw_path
    else:
        absolute = raw_path

    if prefix is not None and absolute.startswith(prefix):
        relative = absolute[len(prefix):]
    elif absolute.startswith(VESSELS_PREFIX):
        relative = _strip_vessel_prefix(absolute)
    else:
        relative = absolute

    return ResolvedPath(absolute=absolute, relative=relative)
