"""Registry of Signal K servers found on the local network.

Browsing itself (mDNS) is left to the caller; any browser can feed
:class:`ServiceDirectory` with ``found``/``resolved``/``removed``
notifications.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from pysignalk._constants import SERVICE_TYPE_HTTP, SERVICE_TYPE_LEGACY, SERVICE_TYPE_WS
from pysignalk.models.discovery import DiscoveredService

_logger = logging.getLogger(__name__)

DirectoryListener = Callable[[list[DiscoveredService]], None]

# Stream-capable advertisements first.
_TYPE_PREFERENCE: dict[str, int] = {
    SERVICE_TYPE_WS: 0,
    SERVICE_TYPE_LEGACY: 1,
    SERVICE_TYPE_HTTP: 2,
}


class ServiceDirectory:
    """Deduplicated, ordered list of discovered services."""

    def __init__(self) -> None:
        self._services: list[DiscoveredService] = []
        self._listeners: list[DirectoryListener] = []

    @property
    def services(self) -> list[DiscoveredService]:
        return list(self._services)

    def _index(self, service: DiscoveredService) -> int | None:
        for idx, existing in enumerate(self._services):
            if existing.key == service.key:
                return idx
        return None

    def found(self, service: DiscoveredService) -> None:
        """A browser saw *service*; ignored if already known."""
        if self._index(service) is not None:
            return
        self._services.append(service)
        self._notify()

    def resolved(self, service: DiscoveredService) -> None:
        """*service* now carries host and port; replaces the known record."""
        idx = self._index(service)
        if idx is None:
            self._services.append(service)
        else:
            self._services[idx] = service
        self._notify()

    def removed(self, service: DiscoveredService) -> None:
        idx = self._index(service)
        if idx is None:
            return
        del self._services[idx]
        self._notify()

    def best(self) -> DiscoveredService | None:
        """Most suitable resolved service for a stream connection."""
        candidates = [s for s in self._services if s.is_resolved]
        if not candidates:
            return None
        return min(candidates, key=lambda s: _TYPE_PREFERENCE.get(s.type, len(_TYPE_PREFERENCE)))

    def add_listener(self, listener: DirectoryListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    def _notify(self) -> None:
        snapshot = self.services
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                _logger.debug("Directory listener failed", exc_info=True)
