"""Antimeridian normalization for cell rings.

A hexagon straddling the +/-180 meridian comes back from the index with
vertices on both sides, e.g. ``179.8`` followed by ``-179.9``. Drawn
naively, that edge runs the long way around the globe. The walk below
rewrites such vertices into the previous vertex's hemisphere (``-179.9``
becomes ``180.1``) so the ring is drawn as a single compact shape.

Only vertices more than 90 degrees from the prime meridian are
considered; a sign flip between two vertices near longitude 0 is a
genuine crossing of the prime meridian and is left alone.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from shapely.geometry import Polygon

from hexpaint.geometry.geomath import Coord, is_antimeridian_side, polygon_rings, sign


def normalize_rings(
    rings: Iterable[Sequence[Coord]],
) -> tuple[list[list[Coord]], bool]:
    """Rewrite wrapped longitudes across a sequence of rings.

    Vertices are walked in their original order, rings one after another,
    with the previous (already corrected) vertex carried across ring
    boundaries.

    Args:
        rings: Rings of (lng, lat) vertices.

    Returns:
        Tuple of (corrected rings, whether any vertex was corrected).
    """
    corrected = False
    previous: Coord | None = None
    result: list[list[Coord]] = []

    for ring in rings:
        out: list[Coord] = []
        for lng, lat in ring:
            if previous is not None and is_antimeridian_side(lng):
                previous_sign = sign(previous[0])
                if sign(lng) != previous_sign:
                    # A previous longitude of exactly 0 flags without shifting
                    lng += 360.0 * previous_sign
                    corrected = True
            current = (lng, lat)
            out.append(current)
            previous = current
        result.append(out)

    return result, corrected


def normalize_ring(ring: Sequence[Coord]) -> tuple[list[Coord], bool]:
    """Rewrite wrapped longitudes in a single ring.

    Args:
        ring: (lng, lat) vertices in drawing order.

    Returns:
        Tuple of (corrected ring, whether any vertex was corrected).

    Example:
        >>> normalize_ring([(179.0, 0.0), (-179.0, 0.0)])
        ([(179.0, 0.0), (181.0, 0.0)], True)
    """
    rings, corrected = normalize_rings([ring])
    return rings[0], corrected


def normalize_polygon(polygon: Polygon) -> tuple[Polygon, bool]:
    """Rewrite wrapped longitudes in every ring of a polygon.

    Args:
        polygon: Polygon whose exterior and holes are normalized.

    Returns:
        Tuple of (normalized polygon, whether any vertex was corrected).
        The input polygon is returned unchanged when nothing was corrected.
    """
    rings, corrected = normalize_rings(polygon_rings(polygon))
    if not corrected:
        return polygon, False
    return Polygon(rings[0], rings[1:]), True
