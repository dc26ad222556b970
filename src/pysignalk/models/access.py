"""Access-request models for the token approval workflow."""

from __future__ import annotations

from enum import StrEnum

from pysignalk.models._base import SignalKBaseModel


class AccessRequestState(StrEnum):
    PENDING = "PENDING"
    COMPLETED = "COMPLETED"


class AccessPermission(StrEnum):
    APPROVED = "APPROVED"
    DENIED = "DENIED"


class AccessRequest(SignalKBaseModel):
    """Body POSTed to the access-request endpoint."""

    client_id: str
    description: str


class AccessResponse(SignalKBaseModel):
    """Immediate reply to an access request.

    ``href`` points at the status resource to poll while the request
    waits for approval.
    """

    state: str
    href: str | None = None
    request_id: str | None = None
    status_code: int | None = None
    message: str | None = None


class AccessRequestResult(SignalKBaseModel):
    """Outcome embedded in a completed request status."""

    permission: str
    token: str | None = None
    expiration_time: str | None = None

    @property
    def approved(self) -> bool:
        return self.permission == AccessPermission.APPROVED

    @property
    def denied(self) -> bool:
        return self.permission == AccessPermission.DENIED


class AccessStatus(SignalKBaseModel):
    """Status resource returned when polling a pending request."""

    state: str
    status_code: int | None = None
    access_request: AccessRequestResult | None = None
    message: str | None = None

    @property
    def completed(self) -> bool:
        return self.state == AccessRequestState.COMPLETED
