"""Service discovery record."""

from __future__ import annotations

from pydantic import Field

from pysignalk._constants import SERVICE_DOMAIN, SERVICE_TYPE_WS
from pysignalk.models._base import SignalKBaseModel


class DiscoveredService(SignalKBaseModel):
    """A Signal K server advertised on the local network.

    ``host`` and ``port`` stay ``None`` until the record is resolved.
    """

    name: str
    type: str = SERVICE_TYPE_WS
    domain: str = SERVICE_DOMAIN
    host: str | None = None
    port: int | None = Field(default=None, ge=0, le=65535)

    @property
    def key(self) -> tuple[str, str, str]:
        """Identity used to deduplicate records across browsers."""
        return (self.name, self.type, self.domain)

    @property
    def is_resolved(self) -> bool:
        return bool(self.host) and self.port is not None
