"""Detection of cells too close to a pole to be drawn reliably."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from hexpaint.geometry.geomath import Coord

DEFAULT_POLE_LATITUDE = 85.0


def is_close_to_pole(
    rings: Iterable[Sequence[Coord]],
    threshold: float = DEFAULT_POLE_LATITUDE,
) -> bool:
    """Check whether any vertex lies beyond threshold degrees of latitude.

    Args:
        rings: Rings of (lng, lat) vertices.
        threshold: Absolute latitude above which a vertex counts as polar.

    Returns:
        True if any |lat| exceeds threshold.
    """
    return any(abs(lat) > threshold for ring in rings for _, lat in ring)
