"""Internal constants shared across the library."""

STREAM_PATH = "/signalk/v1/stream"
ACCESS_REQUESTS_PATH = "/signalk/v1/access/requests"
STREAM_SUBPROTOCOLS: tuple[str, ...] = ("signalk", "ws")

DEFAULT_CONTEXT = "vessels.self"
DEFAULT_CLIENT_DESCRIPTION = "pysignalk"
DEFAULT_REQUEST_TIMEOUT = 10.0

# Ports that imply a TLS listener when no explicit override is given.
TLS_PORTS: frozenset[int] = frozenset({443, 3443})

VESSELS_PREFIX = "vessels."

# ------------------------------------------------------------------
# Persisted token state keys (prefixed with config.storage_prefix)
# ------------------------------------------------------------------

CLIENT_ID_KEY = "clientId"
TOKEN_KEY = "accessToken"
TOKEN_EXPIRATION_KEY = "tokenExpiration"
PENDING_HREF_KEY = "pendingHref"
DENIED_STATE_KEY = "deniedState"

# ------------------------------------------------------------------
# mDNS service types advertised by Signal K servers
# ------------------------------------------------------------------

SERVICE_TYPE_WS = "_signalk-ws._tcp."
SERVICE_TYPE_HTTP = "_signalk-http._tcp."
SERVICE_TYPE_LEGACY = "_sk._tcp."
SERVICE_TYPES: tuple[str, ...] = (SERVICE_TYPE_WS, SERVICE_TYPE_HTTP, SERVICE_TYPE_LEGACY)
SERVICE_DOMAIN = "local."
