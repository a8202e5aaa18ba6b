"""Sampling of the visible map area into a geographic polygon.

Four corners are not enough to describe what the camera sees: under
rotation and pitch a straight screen edge maps to a curve on the globe.
The canvas perimeter is therefore sampled at several evenly spaced points
per edge, walking clockwise from the top-left corner, and every sample is
unprojected to (lng, lat).
"""

from __future__ import annotations

import math
from collections.abc import Callable

from shapely.geometry import Polygon

from hexpaint.exceptions import ViewportUnavailable
from hexpaint.geometry.geomath import Coord, closed_ring
from hexpaint.geometry.primitives import CanvasSize, GeoPoint, ScreenPoint

Unproject = Callable[[ScreenPoint], GeoPoint]

DEFAULT_SAMPLES_PER_SIDE = 3


def perimeter_positions(samples_per_side: int) -> list[tuple[float, float]]:
    """Return relative (0..1) canvas positions around the perimeter.

    Args:
        samples_per_side: Points per edge; each edge's end corner is the
            next edge's first point, so corners appear once.

    Returns:
        4 * samples_per_side positions, clockwise from (0, 0).

    Raises:
        ValueError: If samples_per_side is less than 1.
    """
    if samples_per_side < 1:
        raise ValueError(f"samples_per_side must be >= 1, got {samples_per_side}")
    n = samples_per_side
    top = [(i / n, 0.0) for i in range(n)]
    right = [(1.0, i / n) for i in range(n)]
    bottom = [((n - i) / n, 1.0) for i in range(n)]
    left = [(0.0, (n - i) / n) for i in range(n)]
    return [*top, *right, *bottom, *left]


def unproject_point(unproject: Unproject, screen: ScreenPoint) -> GeoPoint:
    """Unproject one screen point, failing with ViewportUnavailable.

    Raises:
        ViewportUnavailable: If the projection raises or returns a
            non-finite coordinate.
    """
    try:
        geo = unproject(screen)
    except Exception as e:
        raise ViewportUnavailable(
            f"Projection failed: {e}", screen_point=screen.to_tuple()
        ) from e
    if not (math.isfinite(geo.lng) and math.isfinite(geo.lat)):
        raise ViewportUnavailable(
            "Projection returned a non-finite coordinate",
            screen_point=screen.to_tuple(),
        )
    return geo


def sample_viewport(
    unproject: Unproject,
    canvas: CanvasSize,
    samples_per_side: int = DEFAULT_SAMPLES_PER_SIDE,
) -> Polygon:
    """Project the canvas perimeter to a closed geographic polygon.

    Args:
        unproject: Screen (CSS pixel) to geographic transform of the map.
        canvas: Canvas size in device pixels with its pixel ratio.
        samples_per_side: Points sampled along each canvas edge.

    Returns:
        Polygon approximating the camera's visible footprint. A zero-sized
        canvas yields a zero-area polygon.

    Raises:
        ViewportUnavailable: If any sampled point cannot be unprojected.
    """
    coords: list[Coord] = []
    for rx, ry in perimeter_positions(samples_per_side):
        geo = unproject_point(unproject, canvas.relative_to_screen(rx, ry))
        coords.append(geo.to_tuple())

    return Polygon(closed_ring(coords))
