from __future__ import annotations

import pytest

from pysignalk.config import SignalKConfig

_ENV_KEYS = (
    "SIGNALK_CONTEXT",
    "SIGNALK_SUBSCRIBE_ALL",
    "SIGNALK_USE_TLS",
    "SIGNALK_AUTH_TOKEN",
    "SIGNALK_REQUEST_TIMEOUT",
    "SIGNALK_CLIENT_DESCRIPTION",
    "SIGNALK_STATE_PATH",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    config = SignalKConfig.from_env()
    assert config.context == "vessels.self"
    assert config.subscribe_all_on_connect is True
    assert config.use_tls is None
    assert config.auth_token is None
    assert config.state_path is None


def test_env_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIGNALK_CONTEXT", "vessels.urn:mrn:imo:mmsi:230099999")
    monkeypatch.setenv("SIGNALK_SUBSCRIBE_ALL", "no")
    monkeypatch.setenv("SIGNALK_USE_TLS", "on")
    monkeypatch.setenv("SIGNALK_AUTH_TOKEN", "secret")
    monkeypatch.setenv("SIGNALK_REQUEST_TIMEOUT", "2.5")
    monkeypatch.setenv("SIGNALK_STATE_PATH", "/tmp/signalk.json")

    config = SignalKConfig.from_env()

    assert config.context == "vessels.urn:mrn:imo:mmsi:230099999"
    assert config.subscribe_all_on_connect is False
    assert config.use_tls is True
    assert config.auth_token == "secret"
    assert config.request_timeout == 2.5
    assert config.state_path == "/tmp/signalk.json"


def test_unrecognized_bool_falls_back_to_default(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIGNALK_USE_TLS", "maybe")
    assert SignalKConfig.from_env().use_tls is None


def test_overrides_win_over_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("SIGNALK_USE_TLS", "true")
    monkeypatch.setenv("SIGNALK_CONTEXT", "vessels.other")
    config = SignalKConfig.from_env(use_tls=False, context="vessels.self")
    assert config.use_tls is False
    assert config.context == "vessels.self"
