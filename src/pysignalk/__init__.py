"""pysignalk - Async Python client for Signal K marine data servers."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pysignalk")
except PackageNotFoundError:
    __version__ = "0+local"
from pysignalk.api import SignalKApiClient
from pysignalk.client import SignalKClient
from pysignalk.config import SignalKConfig
from pysignalk.connection import ConnectionState, StreamConnection
from pysignalk.discovery import ServiceDirectory
from pysignalk.exceptions import (
    SignalKAccessDeniedError,
    SignalKAuthError,
    SignalKConfigError,
    SignalKError,
    SignalKHttpError,
    SignalKInvalidResponseError,
    SignalKNoAccessTokenError,
    SignalKNoServerError,
    SignalKTransportError,
)
from pysignalk.models import (
    DeltaMessage,
    DiscoveredService,
    SignalKValue,
    SubscriptionPolicy,
    SubscriptionRequest,
    ValueKind,
)
from pysignalk.paths import ResolvedPath, resolve_path
from pysignalk.state import ValueStore, ValueUpdate
from pysignalk.storage import JsonFileStorage, KeyValueStorage, MemoryStorage, MirroredStorage
from pysignalk.subscriptions import SubscriptionManager
from pysignalk.tokens import TokenState, TokenStore

__all__ = [
    "__version__",
    "ConnectionState",
    "DeltaMessage",
    "DiscoveredService",
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "MirroredStorage",
    "ResolvedPath",
    "ServiceDirectory",
    "SignalKAccessDeniedError",
    "SignalKApiClient",
    "SignalKAuthError",
    "SignalKClient",
    "SignalKConfig",
    "SignalKConfigError",
    "SignalKError",
    "SignalKHttpError",
    "SignalKInvalidResponseError",
    "SignalKNoAccessTokenError",
    "SignalKNoServerError",
    "SignalKTransportError",
    "SignalKValue",
    "StreamConnection",
    "SubscriptionManager",
    "SubscriptionPolicy",
    "SubscriptionRequest",
    "TokenState",
    "TokenStore",
    "ValueKind",
    "ValueStore",
    "ValueUpdate",
    "resolve_path",
]
