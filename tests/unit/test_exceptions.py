"""Tests for hexpaint.exceptions module."""

import pytest

from hexpaint.exceptions import DegenerateChunk, HexPaintError, ViewportUnavailable


class TestHexPaintError:
    def test_message(self) -> None:
        error = HexPaintError("boom")
        assert error.message == "boom"
        assert str(error) == "boom"


class TestViewportUnavailable:
    def test_is_hexpaint_error(self) -> None:
        with pytest.raises(HexPaintError):
            raise ViewportUnavailable("off the globe")

    def test_includes_screen_point(self) -> None:
        error = ViewportUnavailable("off the globe", screen_point=(10.0, 20.0))
        assert error.screen_point == (10.0, 20.0)
        assert "screen_point=(10.0, 20.0)" in str(error)

    def test_without_screen_point(self) -> None:
        error = ViewportUnavailable("canvas not ready")
        assert error.screen_point is None
        assert str(error) == "canvas not ready"


class TestDegenerateChunk:
    def test_includes_side(self) -> None:
        error = DegenerateChunk("empty viewport", side=0.0)
        assert error.side == 0.0
        assert str(error) == "empty viewport (side=0.0)"
        assert isinstance(error, HexPaintError)
