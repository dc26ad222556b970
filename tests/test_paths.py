from __future__ import annotations

from pysignalk.paths import ResolvedPath, resolve_path


def test_relative_path_is_qualified_with_context() -> None:
    resolved = resolve_path("vessels.self", None, "navigation.speedOverGround")
    assert resolved == ResolvedPath(
        absolute="vessels.self.navigation.speedOverGround",
        relative="navigation.speedOverGround",
    )


def test_already_absolute_path_is_unchanged() -> None:
    resolved = resolve_path("vessels.self", None, "vessels.self.navigation.speedOverGround")
    assert resolved is not None
    assert resolved.absolute == "vessels.self.navigation.speedOverGround"
    assert resolved.relative == "navigation.speedOverGround"


def test_vessel_prefix_stripped_without_context() -> None:
    resolved = resolve_path(None, None, "vessels.urn:mrn:123.navigation.speedOverGround")
    assert resolved is not None
    assert resolved.absolute == "vessels.urn:mrn:123.navigation.speedOverGround"
    assert resolved.relative == "navigation.speedOverGround"


def test_bare_path_without_context() -> None:
    assert resolve_path(None, "environment.depth.belowKeel", None) == ResolvedPath(
        "environment.depth.belowKeel", "environment.depth.belowKeel"
    )


def test_value_path_wins_over_update_path() -> None:
    resolved = resolve_path("vessels.self", "navigation", "navigation.headingTrue")
    assert resolved is not None
    assert resolved.relative == "navigation.headingTrue"


def test_update_path_used_when_value_has_none() -> None:
    resolved = resolve_path("vessels.self", "navigation.position", None)
    assert resolved is not None
    assert resolved.absolute == "vessels.self.navigation.position"


def test_no_path_returns_none() -> None:
    assert resolve_path("vessels.self", None, None) is None


def test_vessels_prefix_without_further_segments_is_kept() -> None:
    resolved = resolve_path(None, None, "vessels.self")
    assert resolved is not None
    assert resolved.relative == "vessels.self"
