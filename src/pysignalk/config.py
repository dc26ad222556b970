"""Client configuration for pysignalk."""

from __future__ import annotations

import dataclasses
import os
from typing import Any

from pysignalk._constants import DEFAULT_CLIENT_DESCRIPTION, DEFAULT_CONTEXT, DEFAULT_REQUEST_TIMEOUT


def _env_bool(value: str | None, default: bool | None) -> bool | None:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclasses.dataclass(frozen=True)
class SignalKConfig:
    """Client configuration.

    Parameters
    ----------
    context : str
        Signal K context sent with subscribe/unsubscribe messages.
        Defaults to the self vessel.
    subscribe_all_on_connect : bool
        Ask the server to stream every path (``subscribe=all``) instead
        of nothing (``subscribe=none``) when the stream opens.
    use_tls : bool or None
        Force ``wss``/``https`` on or off.  ``None`` picks TLS for the
        well-known secure ports (443, 3443).
    auth_token : str or None
        Static bearer token sent with the stream handshake.
    request_timeout : float
        Total timeout in seconds for each REST request.
    client_description : str
        Description shown to the server operator in access requests.
    state_path : str or None
        JSON file for persisted token state.  ``None`` keeps state in
        memory for the lifetime of the client.
    storage_prefix : str
        Prefix applied to every persisted key.
    """

    context: str = DEFAULT_CONTEXT
    subscribe_all_on_connect: bool = True
    use_tls: bool | None = None
    auth_token: str | None = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    client_description: str = DEFAULT_CLIENT_DESCRIPTION
    state_path: str | None = None
    storage_prefix: str = "pysignalk."

    @classmethod
    def from_env(cls, **overrides: Any) -> SignalKConfig:
        """Create configuration from ``SIGNALK_*`` environment variables.

        Explicit keyword arguments override environment values.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "SIGNALK_CONTEXT": "context",
            "SIGNALK_AUTH_TOKEN": "auth_token",
            "SIGNALK_CLIENT_DESCRIPTION": "client_description",
            "SIGNALK_STATE_PATH": "state_path",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        if "subscribe_all_on_connect" not in overrides:
            config_kwargs["subscribe_all_on_connect"] = _env_bool(env.get("SIGNALK_SUBSCRIBE_ALL"), True)

        if "use_tls" not in overrides:
            config_kwargs["use_tls"] = _env_bool(env.get("SIGNALK_USE_TLS"), None)

        timeout_env = env.get("SIGNALK_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            config_kwargs["request_timeout"] = float(timeout_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
