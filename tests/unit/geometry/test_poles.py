"""Unit tests for near-pole detection."""

from __future__ import annotations

import pytest

from hexpaint.geometry import DEFAULT_POLE_LATITUDE, is_close_to_pole


def test_default_threshold_is_85_degrees() -> None:
    assert DEFAULT_POLE_LATITUDE == 85.0


@pytest.mark.parametrize(
    ("lat", "expected"),
    [(84.9, False), (85.0, False), (85.01, True), (-85.01, True), (0.0, False)],
)
def test_single_vertex_threshold(lat: float, expected: bool) -> None:
    assert is_close_to_pole([[(10.0, lat)]]) is expected


def test_any_vertex_in_any_ring_counts() -> None:
    rings = [[(0.0, 10.0), (1.0, 10.0)], [(0.0, 20.0), (1.0, -89.0)]]
    assert is_close_to_pole(rings) is True


def test_custom_threshold() -> None:
    assert is_close_to_pole([[(0.0, 60.0)]], threshold=50.0) is True
    assert is_close_to_pole([[(0.0, 60.0)]], threshold=70.0) is False


def test_no_rings() -> None:
    assert is_close_to_pole([]) is False
