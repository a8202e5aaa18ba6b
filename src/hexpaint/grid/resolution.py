"""Zoom level to H3 resolution mapping.

The map's zoom range [0, MAX_ZOOM] is mapped linearly onto the index's
resolution range [0, MAX_RESOLUTION] and rounded to the nearest integer:

    resolution = round(max(zoom, 0) / MAX_ZOOM * MAX_RESOLUTION)

Rounding is half-up to agree with browser map clients. The result is
clamped to [0, MAX_RESOLUTION] so zooms beyond the map's maximum (or
non-finite zooms) never produce an invalid resolution.

Algorithm Invariant:
    resolution is monotonically non-decreasing in zoom.
"""

from __future__ import annotations

import logging
import math
from typing import Protocol

from hexpaint.geometry.geomath import round_half_up

logger = logging.getLogger(__name__)

MAX_ZOOM = 22.0
MAX_RESOLUTION = 15


class ResolutionSelectorProtocol(Protocol):
    """Protocol for zoom to resolution strategies."""

    def select_resolution(self, zoom: float) -> int:
        """Return the grid resolution to draw at the given zoom."""
        ...


class ZoomResolutionSelector:
    """Linear zoom to resolution mapping with clamping.

    Example:
        >>> ZoomResolutionSelector().select_resolution(10)
        7
    """

    __slots__ = ("_max_resolution", "_max_zoom")

    def __init__(
        self,
        max_zoom: float = MAX_ZOOM,
        max_resolution: int = MAX_RESOLUTION,
    ) -> None:
        """Initialize the selector.

        Args:
            max_zoom: Zoom level mapped to max_resolution.
            max_resolution: Finest resolution produced.

        Raises:
            ValueError: If max_zoom is not positive or max_resolution is
                outside [0, 15].
        """
        if max_zoom <= 0:
            raise ValueError(f"max_zoom must be positive, got {max_zoom}")
        if not 0 <= max_resolution <= MAX_RESOLUTION:
            raise ValueError(
                f"max_resolution must be in [0, {MAX_RESOLUTION}], got {max_resolution}"
            )
        self._max_zoom = max_zoom
        self._max_resolution = max_resolution

    @property
    def max_resolution(self) -> int:
        return self._max_resolution

    def select_resolution(self, zoom: float) -> int:
        """Map a zoom level to a resolution in [0, max_resolution]."""
        if math.isnan(zoom):
            logger.debug("Non-finite zoom %r, using resolution 0", zoom)
            return 0
        if math.isinf(zoom):
            return self._max_resolution if zoom > 0 else 0

        raw = round_half_up(max(zoom, 0.0) / self._max_zoom * self._max_resolution)
        if raw > self._max_resolution:
            logger.debug(
                "Resolution %d for zoom %.2f out of range, clamping to %d",
                raw,
                zoom,
                self._max_resolution,
            )
            return self._max_resolution
        return max(raw, 0)


def resolution_for_zoom(zoom: float) -> int:
    """Map a zoom level to a resolution using the default 22 -> 15 scale."""
    return ZoomResolutionSelector().select_resolution(zoom)
