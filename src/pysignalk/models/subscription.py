"""Subscription request model (client -> server)."""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pysignalk.models._base import SignalKBaseModel


class SubscriptionPolicy(StrEnum):
    """Server-side throttling modes defined by the protocol."""

    INSTANT = "instant"
    IDEAL = "ideal"
    FIXED = "fixed"


class SubscriptionRequest(SignalKBaseModel):
    """Request the server to stream one path.

    Parameters
    ----------
    path : str
        Path relative to the subscription context; wildcards allowed.
    policy : str or None
        Throttling policy, usually one of :class:`SubscriptionPolicy`.
    period : float or None
        Seconds between updates for the ``fixed`` policy.
    min_period : float or None
        Minimum seconds between updates.
    """

    path: str
    policy: str | None = None
    period: float | None = None
    min_period: float | None = None

    def to_message(self) -> dict[str, Any]:
        """Entry for the ``subscribe`` array of a control message."""
        return self.to_wire()
