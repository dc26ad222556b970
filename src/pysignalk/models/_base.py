"""Base model for Signal K wire payloads.

Every wire model inherits from :class:`SignalKBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase keys (``minPeriod``,
  ``expirationTime``) map automatically to snake_case fields.
* ``populate_by_name`` so models can be built from Python keyword
  arguments as well as from decoded JSON.
* :meth:`SignalKBaseModel.to_wire` which dumps the camelCase form and
  leaves out unset optional fields.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SignalKBaseModel(BaseModel):
    """Frozen, alias-aware base for all wire models."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
    )

    def to_wire(self) -> dict[str, Any]:
        """Dump to the JSON-ready camelCase form, dropping ``None`` fields."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")
