"""Persisted access-token state.

:class:`TokenStore` owns every piece of state the access-request workflow
needs to survive restarts: the stable client identifier, the issued token
and its expiry, the href of an outstanding request, and whether the last
request was denied.  The network side of the workflow lives on
:class:`~pysignalk.api.SignalKApiClient`.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable
from datetime import UTC, datetime
from enum import StrEnum

from pysignalk._constants import (
    CLIENT_ID_KEY,
    DENIED_STATE_KEY,
    PENDING_HREF_KEY,
    TOKEN_EXPIRATION_KEY,
    TOKEN_KEY,
)
from pysignalk.storage import KeyValueStorage, MemoryStorage

_logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


def parse_expiration(value: str | None) -> datetime | None:
    """Parse an ISO-8601 expiration timestamp.

    Naive timestamps are taken as UTC.  Returns ``None`` when the value is
    missing or unparseable.
    """
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = f"{text[:-1]}+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


class TokenState(StrEnum):
    NO_TOKEN = "no_token"
    PENDING_APPROVAL = "pending_approval"
    VALID = "valid"
    DENIED = "denied"


class TokenStore:
    """Access-token lifecycle state on top of a :class:`KeyValueStorage`.

    Parameters
    ----------
    storage : KeyValueStorage or None
        Backend for persisted values.  Defaults to in-memory storage.
    prefix : str
        Prefix applied to every storage key.
    clock : callable
        Returns the current aware datetime; used for expiry checks.
    """

    def __init__(
        self,
        storage: KeyValueStorage | None = None,
        *,
        prefix: str = "",
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._storage: KeyValueStorage = storage if storage is not None else MemoryStorage()
        self._prefix = prefix
        self._clock = clock

    def _key(self, name: str) -> str:
        return f"{self._prefix}{name}"

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------

    @property
    def client_id(self) -> str:
        """Stable client identifier, generated and persisted on first use."""
        existing = self._storage.get_string(self._key(CLIENT_ID_KEY))
        if existing:
            return existing
        new_id = str(uuid.uuid4()).upper()
        self._storage.set(self._key(CLIENT_ID_KEY), new_id)
        _logger.debug("Generated new client id")
        return new_id

    @property
    def expiration(self) -> str | None:
        return self._storage.get_string(self._key(TOKEN_EXPIRATION_KEY))

    @property
    def is_token_expired(self) -> bool:
        """Whether the stored expiration has passed.

        A missing or unparseable expiration means the token never expires.
        """
        expires_at = parse_expiration(self.expiration)
        if expires_at is None:
            return False
        return self._clock() >= expires_at

    @property
    def token(self) -> str | None:
        """Current token, or ``None`` when absent or expired.

        Expired tokens are purged from storage on read.
        """
        if self.is_token_expired:
            _logger.debug("Stored access token expired; purging")
            self.clear_token()
            return None
        return self._storage.get_string(self._key(TOKEN_KEY))

    @property
    def pending_href(self) -> str | None:
        return self._storage.get_string(self._key(PENDING_HREF_KEY))

    @property
    def denied(self) -> bool:
        return self._storage.get_bool(self._key(DENIED_STATE_KEY))

    @property
    def state(self) -> TokenState:
        if self.token is not None:
            return TokenState.VALID
        if self.denied:
            return TokenState.DENIED
        if self.pending_href is not None:
            return TokenState.PENDING_APPROVAL
        return TokenState.NO_TOKEN

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def store_token(self, token: str, expiration: str | None = None) -> None:
        """Persist an approved token; clears any denied flag."""
        self._storage.set(self._key(TOKEN_KEY), token)
        if expiration:
            self._storage.set(self._key(TOKEN_EXPIRATION_KEY), expiration)
        else:
            self._storage.remove(self._key(TOKEN_EXPIRATION_KEY))
        self.clear_denied()

    def clear_token(self) -> None:
        self._storage.remove(self._key(TOKEN_KEY))
        self._storage.remove(self._key(TOKEN_EXPIRATION_KEY))

    def set_pending(self, href: str) -> None:
        self._storage.set(self._key(PENDING_HREF_KEY), href)

    def clear_pending(self) -> None:
        self._storage.remove(self._key(PENDING_HREF_KEY))

    def set_denied(self) -> None:
        self._storage.set(self._key(DENIED_STATE_KEY), True)

    def clear_denied(self) -> None:
        self._storage.remove(self._key(DENIED_STATE_KEY))

    def reset_authorization(self) -> None:
        """Forget token, expiration and denied flag (after a 401)."""
        self.clear_token()
        self.clear_denied()
