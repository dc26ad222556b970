from __future__ import annotations

from pysignalk._redact import redact_for_log, redact_token


def test_redact_token() -> None:
    assert redact_token(None) == "<none>"
    assert redact_token("abcdef") == "<token:6c>"


def test_sensitive_keys_are_masked_recursively() -> None:
    payload = {
        "state": "COMPLETED",
        "accessRequest": {"permission": "APPROVED", "token": "eyJhbGciOi"},
        "clientId": "1234-ABCD",
        "items": [{"Authorization": "Bearer x"}],
    }
    redacted = redact_for_log(payload)
    assert redacted["state"] == "COMPLETED"
    assert redacted["accessRequest"]["token"] == "<redacted>"
    assert redacted["clientId"] == "<redacted>"
    assert redacted["items"][0]["Authorization"] == "<redacted>"


def test_scalars_pass_through_unchanged() -> None:
    payload = {"statusCode": 202, "href": "/signalk/v1/requests/1", "ok": True, "message": None}
    assert redact_for_log(payload) == payload
    assert redact_for_log([1.5, "x"]) == [1.5, "x"]
