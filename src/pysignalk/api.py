"""REST control-plane client with access-token acquisition."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from pysignalk._api.access import fetch_access_status, post_access_request
from pysignalk._constants import DEFAULT_CLIENT_DESCRIPTION
from pysignalk._redact import redact_token
from pysignalk._transport import HttpResponse, Transport, join_url
from pysignalk.exceptions import (
    SignalKAccessDeniedError,
    SignalKError,
    SignalKHttpError,
    SignalKNoAccessTokenError,
    SignalKNoServerError,
)
from pysignalk.tokens import TokenStore

_logger = logging.getLogger(__name__)


class SignalKApiClient:
    """GET/PUT against the Signal K REST API.

    Writes require a bearer token.  When none is stored the client runs
    the access-request workflow: POST a request, then poll its status
    href until the server operator approves or denies it.  Only one
    acquisition runs at a time; overlapping callers wait for the same
    outcome.

    Usage::

        api = SignalKApiClient(transport, TokenStore(storage))
        api.set_base_url("http://demo.signalk.org:80")
        body = await api.get("/signalk/v1/api/vessels/self")
    """

    def __init__(
        self,
        transport: Transport,
        tokens: TokenStore,
        *,
        description: str = DEFAULT_CLIENT_DESCRIPTION,
    ) -> None:
        self._transport = transport
        self._tokens = tokens
        self._description = description
        self._base_url: str | None = None
        self._acquire_task: asyncio.Task[None] | None = None
        self._acquire_full_cycle = False
        self._request_pending = False

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def base_url(self) -> str | None:
        return self._base_url

    @property
    def tokens(self) -> TokenStore:
        return self._tokens

    @property
    def has_valid_token(self) -> bool:
        return self._tokens.token is not None

    @property
    def is_token_request_pending(self) -> bool:
        """Whether an access-request POST is in flight."""
        return self._request_pending

    def set_base_url(self, base_url: str) -> None:
        """Point the client at a server (``scheme://host:port``)."""
        self._base_url = base_url.rstrip("/")

    def _require_base_url(self) -> str:
        if self._base_url is None:
            raise SignalKNoServerError("No Signal K server URL configured")
        return self._base_url

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------

    async def _send(
        self,
        method: str,
        path: str,
        *,
        token: str | None,
        body: bytes | None = None,
    ) -> HttpResponse:
        headers: dict[str, str] = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if body is not None:
            headers["Content-Type"] = "application/json"
        url = join_url(self._require_base_url(), path)
        return await self._transport.request(method, url, headers=headers, body=body)

    async def get(self, path: str) -> bytes:
        """GET *path* and return the response body.

        A 401 clears the stored authorization, runs one acquisition cycle
        and retries exactly once.

        Raises
        ------
        SignalKNoServerError
            No base URL configured.
        SignalKInvalidResponseError
            The request produced no HTTP response.
        SignalKHttpError
            Any status other than 200 (after the single retry).
        """
        response = await self._send("GET", path, token=self._tokens.token)

        if response.status == 401:
            _logger.debug("GET %s unauthorized; refreshing token and retrying once", path)
            self._tokens.reset_authorization()
            await self.ensure_token_available()
            response = await self._send("GET", path, token=self._tokens.token)

        if response.status != 200:
            raise SignalKHttpError(response.status, endpoint=path)
        return response.body

    async def put(self, path: str, data: bytes) -> None:
        """PUT *data* (JSON bytes) to *path*.

        A token is acquired first.  On 401 the token is dropped and a new
        one is requested for the next call; this call still fails since
        the body has already been sent.

        Raises
        ------
        SignalKNoServerError
            No base URL configured.
        SignalKNoAccessTokenError
            No token could be obtained.
        SignalKInvalidResponseError
            The request produced no HTTP response.
        SignalKHttpError
            Any non-2xx status.
        """
        self._require_base_url()
        await self.ensure_token_available()

        token = self._tokens.token
        if token is None:
            raise SignalKNoAccessTokenError("No access token available")

        response = await self._send("PUT", path, token=token, body=data)

        if response.status == 401:
            _logger.debug("PUT %s unauthorized; requesting a new token for the next call", path)
            self._tokens.reset_authorization()
            await self.ensure_token_available()

        if not response.ok:
            raise SignalKHttpError(response.status, endpoint=path)

    async def request_access_token(self, description: str | None = None) -> bool:
        """Explicitly start (or resume) the access-request workflow.

        Returns whether a token is available afterwards.

        Raises
        ------
        SignalKAccessDeniedError
            A previous request was denied.
        """
        if self._tokens.denied:
            raise SignalKAccessDeniedError("Access was denied by the server")
        return await self.ensure_token_available(description)

    async def check_token_status(self) -> None:
        """Poll an outstanding request, if any (run after a server change).

        Shares the single in-flight slot with :meth:`ensure_token_available`;
        if an acquisition is already running this waits for it instead.
        """
        href = self._tokens.pending_href
        if href is None or self._base_url is None:
            return
        await self._run_exclusive(lambda: self._poll_pending_request(href), full_cycle=False)

    # ------------------------------------------------------------------
    # Token acquisition
    # ------------------------------------------------------------------

    async def ensure_token_available(self, description: str | None = None) -> bool:
        """Make sure a token is stored if the server will give one.

        Never raises for token-flow failures; the outcome is visible only
        as the presence or absence of a token.
        """
        if self._tokens.token is not None:
            return True

        ran_full_cycle = await self._run_exclusive(lambda: self._acquire_token(description), full_cycle=True)
        if not ran_full_cycle and self._tokens.token is None:
            # Joined a status-only poll; run the complete cycle now.
            await self._run_exclusive(lambda: self._acquire_token(description), full_cycle=True)
        return self._tokens.token is not None

    async def _run_exclusive(self, factory: Callable[[], Awaitable[None]], *, full_cycle: bool) -> bool:
        """Run *factory* unless a token task is already in flight, then wait.

        Returns whether the awaited task was a complete acquisition cycle.
        """
        task = self._acquire_task
        if task is None or task.done():
            task = asyncio.create_task(factory())
            self._acquire_task = task
            self._acquire_full_cycle = full_cycle
        ran_full_cycle = self._acquire_full_cycle
        await asyncio.shield(task)
        return ran_full_cycle

    async def _acquire_token(self, description: str | None) -> None:
        if self._tokens.token is not None:
            return
        if self._tokens.denied:
            _logger.debug("Access previously denied; not requesting a token")
            return

        href = self._tokens.pending_href
        if href is not None:
            await self._poll_pending_request(href)
            if self._tokens.token is not None:
                return
            # A poll that ends in DENIED still makes one fresh request here;
            # later calls stop at the denied check above.

        await self._request_new_token(description)

    async def _poll_pending_request(self, href: str) -> None:
        base_url = self._base_url
        if base_url is None:
            return
        try:
            status = await fetch_access_status(self._transport, base_url, href)
        except SignalKError:
            _logger.debug("Access status poll failed", exc_info=True)
            return
        if status is None or not status.completed:
            # Still pending (or unreadable): keep the href for a later poll.
            return

        self._tokens.clear_pending()
        result = status.access_request
        if result is None:
            return
        if result.approved and result.token:
            self._tokens.store_token(result.token, result.expiration_time)
            _logger.debug("Access approved token=%s", redact_token(result.token))
        elif result.denied:
            _logger.debug("Access request denied")
            self._tokens.set_denied()

    async def _request_new_token(self, description: str | None) -> None:
        base_url = self._base_url
        if base_url is None:
            return

        self._request_pending = True
        try:
            response, access = await post_access_request(
                self._transport,
                base_url,
                self._tokens.client_id,
                description or self._description,
            )
        except SignalKError:
            _logger.debug("Access request failed", exc_info=True)
            return
        finally:
            self._request_pending = False

        if response.status == 501:
            _logger.debug("Server does not support access requests")
            return
        if access is None or response.status not in (202, 400) or not access.href:
            return

        self._tokens.set_pending(access.href)
        # Some servers answer 400 when a request for this client id already
        # exists; its href is returned, so poll it right away.
        if response.status == 400:
            await self._poll_pending_request(access.href)
