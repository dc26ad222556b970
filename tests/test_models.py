"""Tests for wire model parsing."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from pysignalk.models.access import AccessRequest, AccessStatus
from pysignalk.models.delta import DeltaMessage
from pysignalk.models.discovery import DiscoveredService
from pysignalk.models.subscription import SubscriptionPolicy, SubscriptionRequest
from pysignalk.models.value import SignalKValue, ValueKind


class TestSignalKValue:
    def test_true_decodes_to_bool_not_int(self) -> None:
        value = SignalKValue.decode(True)
        assert value.kind is ValueKind.BOOL
        assert value.data is True
        assert value.double_value() is None

    def test_integer(self) -> None:
        value = SignalKValue.decode(7)
        assert value.kind is ValueKind.INT
        assert value.double_value() == 7.0

    def test_float(self) -> None:
        value = SignalKValue.decode(3.25)
        assert value.kind is ValueKind.FLOAT
        assert value.double_value() == 3.25

    def test_numeric_string_stays_string(self) -> None:
        value = SignalKValue.decode("12.5")
        assert value.kind is ValueKind.STRING
        assert value.data == "12.5"
        assert value.double_value() == 12.5

    def test_non_numeric_string_has_no_double(self) -> None:
        assert SignalKValue.decode("motoring").double_value() is None
        assert SignalKValue.decode(" 12").double_value() is None

    def test_null(self) -> None:
        value = SignalKValue.decode(None)
        assert value.is_null
        assert value.double_value() is None

    def test_position_mapping(self) -> None:
        value = SignalKValue.decode({"latitude": 52, "longitude": 4.9})
        assert value.kind is ValueKind.MAPPING
        assert value.mapping_value() == {"latitude": 52.0, "longitude": 4.9}
        assert value.double_value() is None

    @pytest.mark.parametrize("raw", [[1, 2], {"name": "x"}, {"flag": True}, {"nested": {"a": 1}}])
    def test_unsupported_shapes_rejected(self, raw: object) -> None:
        with pytest.raises(ValueError):
            SignalKValue.decode(raw)


class TestDeltaMessage:
    def test_parses_values_and_extras(self) -> None:
        delta = DeltaMessage.model_validate(
            {
                "context": "vessels.self",
                "updates": [
                    {
                        "$source": "nmea0183.GP",
                        "timestamp": "2026-01-01T00:00:00Z",
                        "values": [{"path": "navigation.speedOverGround", "value": 3.1}],
                    }
                ],
            }
        )
        update = delta.updates[0]
        assert update.source_ref == "nmea0183.GP"
        assert update.timestamp == "2026-01-01T00:00:00Z"
        assert update.values[0].value == SignalKValue(kind=ValueKind.FLOAT, data=3.1)

    def test_missing_updates_rejected(self) -> None:
        with pytest.raises(ValidationError):
            DeltaMessage.model_validate({"name": "signalk-server", "version": "2.0", "self": "vessels.self"})

    def test_bad_value_rejects_whole_message(self) -> None:
        with pytest.raises(ValidationError):
            DeltaMessage.model_validate({"updates": [{"values": [{"path": "a", "value": [1]}]}]})


class TestSubscriptionRequest:
    def test_minimal_message(self) -> None:
        assert SubscriptionRequest(path="navigation.*").to_message() == {"path": "navigation.*"}

    def test_full_message_uses_camel_case(self) -> None:
        request = SubscriptionRequest(path="a.b", policy=SubscriptionPolicy.FIXED, period=1.0, min_period=0.5)
        assert request.to_message() == {"path": "a.b", "policy": "fixed", "period": 1.0, "minPeriod": 0.5}

    def test_equality_covers_all_fields(self) -> None:
        assert SubscriptionRequest(path="a", policy="instant") == SubscriptionRequest(path="a", policy="instant")
        assert SubscriptionRequest(path="a", period=1.0) != SubscriptionRequest(path="a", period=2.0)


class TestAccessModels:
    def test_request_body(self) -> None:
        assert AccessRequest(client_id="ID", description="app").to_wire() == {"clientId": "ID", "description": "app"}

    def test_completed_status(self) -> None:
        status = AccessStatus.model_validate(
            {
                "state": "COMPLETED",
                "statusCode": 200,
                "accessRequest": {"permission": "APPROVED", "token": "T", "expirationTime": "2030-01-01T00:00:00Z"},
            }
        )
        assert status.completed
        assert status.access_request is not None
        assert status.access_request.approved
        assert status.access_request.expiration_time == "2030-01-01T00:00:00Z"


def test_discovered_service_resolution() -> None:
    service = DiscoveredService(name="boat", type="_signalk-ws._tcp.")
    assert not service.is_resolved
    resolved = service.model_copy(update={"host": "boat.local", "port": 3000})
    assert resolved.is_resolved
    assert resolved.key == service.key
