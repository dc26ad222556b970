"""Data models for Signal K wire payloads."""

from pysignalk.models._base import SignalKBaseModel
from pysignalk.models.access import (
    AccessPermission,
    AccessRequest,
    AccessRequestResult,
    AccessRequestState,
    AccessResponse,
    AccessStatus,
)
from pysignalk.models.delta import DeltaMessage, DeltaUpdate, DeltaValue
from pysignalk.models.discovery import DiscoveredService
from pysignalk.models.subscription import SubscriptionPolicy, SubscriptionRequest
from pysignalk.models.value import SignalKValue, ValueKind

__all__ = [
    "AccessPermission",
    "AccessRequest",
    "AccessRequestResult",
    "AccessRequestState",
    "AccessResponse",
    "AccessStatus",
    "DeltaMessage",
    "DeltaUpdate",
    "DeltaValue",
    "DiscoveredService",
    "SignalKBaseModel",
    "SignalKValue",
    "SubscriptionPolicy",
    "SubscriptionRequest",
    "ValueKind",
]
