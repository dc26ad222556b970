"""Custom exception hierarchy for pysignalk."""

from __future__ import annotations


class SignalKError(Exception):
    """Base exception for all pysignalk errors."""


class SignalKConfigError(SignalKError):
    """Invalid or missing configuration."""


class SignalKNoServerError(SignalKConfigError):
    """No Signal K server URL configured."""


class SignalKAuthError(SignalKError):
    """Authorization could not be established."""


class SignalKNoAccessTokenError(SignalKAuthError):
    """No access token available for a request that requires one."""


class SignalKAccessDeniedError(SignalKAuthError):
    """The server denied a previous access request.

    The denied state is persisted; no further access requests are made
    until a later approval clears it.
    """


class SignalKTransportError(SignalKError):
    """HTTP-level failure (network, non-2xx, invalid payload)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class SignalKInvalidResponseError(SignalKTransportError):
    """The request produced no usable HTTP response."""


class SignalKHttpError(SignalKTransportError):
    """Server answered with an unexpected HTTP status."""

    def __init__(self, status_code: int, *, endpoint: str = "", message: str | None = None) -> None:
        super().__init__(
            message or f"HTTP error: {status_code}",
            status_code=status_code,
            endpoint=endpoint,
        )
        self.status_code: int = status_code
