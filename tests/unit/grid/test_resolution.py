"""Unit tests for the zoom to resolution mapping.

Tests ZoomResolutionSelector including:
- Known zoom levels
- Clamping of out-of-range and non-finite zooms
- Property-based verification of the formula and monotonicity
"""

from __future__ import annotations

import math

import pytest
from hypothesis import given
from hypothesis import strategies as st

from hexpaint.grid import MAX_RESOLUTION, MAX_ZOOM, ZoomResolutionSelector, resolution_for_zoom


@pytest.fixture
def selector() -> ZoomResolutionSelector:
    return ZoomResolutionSelector()


class TestKnownZooms:
    @pytest.mark.parametrize(
        ("zoom", "expected"),
        [
            (0, 0),
            (10, 7),
            (22, 15),
            (1.5, 1),  # 1.02 rounds down
            (11, 8),  # 7.5 rounds half up
            (5.13, 3),
        ],
    )
    def test_zoom_to_resolution(
        self, selector: ZoomResolutionSelector, zoom: float, expected: int
    ) -> None:
        assert selector.select_resolution(zoom) == expected

    def test_module_level_helper(self) -> None:
        assert resolution_for_zoom(10) == 7


class TestClamping:
    def test_negative_zoom_is_resolution_0(self, selector: ZoomResolutionSelector) -> None:
        assert selector.select_resolution(-3) == 0

    def test_zoom_beyond_max_is_clamped(self, selector: ZoomResolutionSelector) -> None:
        assert selector.select_resolution(30) == MAX_RESOLUTION

    def test_nan_zoom_is_resolution_0(self, selector: ZoomResolutionSelector) -> None:
        assert selector.select_resolution(math.nan) == 0

    def test_infinite_zooms(self, selector: ZoomResolutionSelector) -> None:
        assert selector.select_resolution(math.inf) == MAX_RESOLUTION
        assert selector.select_resolution(-math.inf) == 0

    def test_custom_scale(self) -> None:
        selector = ZoomResolutionSelector(max_zoom=20, max_resolution=10)
        assert selector.select_resolution(10) == 5
        assert selector.max_resolution == 10


class TestValidation:
    def test_rejects_non_positive_max_zoom(self) -> None:
        with pytest.raises(ValueError, match="max_zoom must be positive"):
            ZoomResolutionSelector(max_zoom=0)

    def test_rejects_max_resolution_above_15(self) -> None:
        with pytest.raises(ValueError, match="max_resolution must be in"):
            ZoomResolutionSelector(max_resolution=16)


class TestProperties:
    @given(st.floats(min_value=0.0, max_value=MAX_ZOOM, allow_nan=False))
    def test_formula(self, zoom: float) -> None:
        expected = math.floor(zoom / MAX_ZOOM * MAX_RESOLUTION + 0.5)
        assert resolution_for_zoom(zoom) == expected

    @given(
        st.floats(min_value=0.0, max_value=MAX_ZOOM, allow_nan=False),
        st.floats(min_value=0.0, max_value=MAX_ZOOM, allow_nan=False),
    )
    def test_monotonic(self, a: float, b: float) -> None:
        low, high = sorted((a, b))
        assert resolution_for_zoom(low) <= resolution_for_zoom(high)

    @given(st.floats(allow_nan=True, allow_infinity=True))
    def test_always_in_range(self, zoom: float) -> None:
        assert 0 <= resolution_for_zoom(zoom) <= MAX_RESOLUTION
