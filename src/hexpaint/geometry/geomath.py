"""Numeric and polygon helpers shared by the grid and selection engines.

Boolean operations, buffering and scaling are delegated to shapely and
geodesic forward computations to pyproj; this module only orchestrates
them in the planar longitude/latitude space the map works in.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np
from pyproj import Geod
from shapely import affinity
from shapely.geometry import MultiPolygon, Polygon, box, mapping
from shapely.geometry.base import BaseGeometry

# (minx, miny, maxx, maxy) in degrees
BBox = tuple[float, float, float, float]
Coord = tuple[float, float]

GEOD = Geod(ellps="WGS84")

# Longitude beyond which a vertex is on the antimeridian side of the globe
ANTIMERIDIAN_SIDE_LNG = 90.0


def sign(value: float) -> int:
    """Return -1, 0 or 1 according to the sign of value."""
    if value > 0:
        return 1
    if value < 0:
        return -1
    return 0


def is_antimeridian_side(lng: float) -> bool:
    """Check whether a longitude lies on the far side of the globe from 0."""
    return abs(lng) > ANTIMERIDIAN_SIDE_LNG


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves rounded towards +infinity."""
    return math.floor(value + 0.5)


def bounding_box(geometry: BaseGeometry) -> BBox:
    """Return the (minx, miny, maxx, maxy) extent of a geometry."""
    minx, miny, maxx, maxy = geometry.bounds
    return (float(minx), float(miny), float(maxx), float(maxy))


def bbox_size(bbox: BBox) -> tuple[float, float]:
    """Return the (width, height) of a bounding box in degrees."""
    minx, miny, maxx, maxy = bbox
    return (abs(maxx - minx), abs(maxy - miny))


def scale_about_centroid(geometry: BaseGeometry, factor: float) -> BaseGeometry:
    """Scale a geometry uniformly about its centroid."""
    return affinity.scale(geometry, xfact=factor, yfact=factor, origin="centroid")


def buffer_degrees(geometry: BaseGeometry, distance: float) -> BaseGeometry:
    """Grow a geometry outward by a planar distance in degrees."""
    return geometry.buffer(distance)


def shift_longitude(geometry: BaseGeometry, offset: float) -> BaseGeometry:
    """Translate a geometry east by offset degrees (returned as-is for 0)."""
    if not offset:
        return geometry
    return affinity.translate(geometry, xoff=offset)


def union(a: BaseGeometry | None, b: BaseGeometry) -> BaseGeometry:
    """Union b into a, treating a missing a as empty."""
    if a is None or a.is_empty:
        return b
    return a.union(b)


def difference(a: BaseGeometry | None, b: BaseGeometry) -> BaseGeometry | None:
    """Subtract b from a; an empty result is returned as None."""
    if a is None or a.is_empty:
        return None
    result = a.difference(b)
    if result.is_empty:
        return None
    return _polygonal(result)


def intersects(a: BaseGeometry | None, b: BaseGeometry) -> bool:
    """Check whether two geometries share any area or boundary."""
    if a is None or a.is_empty:
        return False
    return bool(a.intersects(b))


def _polygonal(geometry: BaseGeometry) -> BaseGeometry:
    """Drop lower-dimensional debris that boolean operations can leave."""
    if isinstance(geometry, Polygon | MultiPolygon):
        return geometry
    polygons = list(iter_polygons(geometry))
    if len(polygons) == 1:
        return polygons[0]
    return MultiPolygon(polygons)


def iter_polygons(geometry: BaseGeometry) -> Iterable[Polygon]:
    """Yield the non-empty polygons contained in any geometry."""
    if geometry.is_empty:
        return
    if isinstance(geometry, Polygon):
        yield geometry
    elif hasattr(geometry, "geoms"):
        for part in geometry.geoms:
            yield from iter_polygons(part)


def closed_ring(coords: Sequence[Coord]) -> list[Coord]:
    """Return coords as a list whose last vertex repeats the first."""
    ring = [(float(x), float(y)) for x, y in coords]
    if ring and ring[0] != ring[-1]:
        ring.append(ring[0])
    return ring


def polygon_rings(polygon: Polygon) -> list[list[Coord]]:
    """Return the exterior ring followed by any hole rings of a polygon."""
    rings = [list(polygon.exterior.coords)]
    rings.extend(list(interior.coords) for interior in polygon.interiors)
    return [[(float(x), float(y)) for x, y in ring] for ring in rings]


def split_at_antimeridian(geometry: BaseGeometry) -> list[Polygon]:
    """Cut a geometry into pieces that each lie within [-180, 180].

    Parts lying in a neighbouring world copy are shifted by a multiple of
    360 degrees back into the primary copy. Latitudes are clipped to
    [-90, 90].

    Args:
        geometry: Polygonal geometry in (possibly unwrapped) degrees.

    Returns:
        Polygons with every longitude inside [-180, 180].
    """
    if geometry.is_empty:
        return []
    minx, _, maxx, _ = geometry.bounds
    first = math.floor((minx + 180.0) / 360.0)
    last = math.floor((maxx + 180.0) / 360.0)

    pieces: list[Polygon] = []
    for copy in range(first, last + 1):
        offset = copy * 360.0
        window = box(-180.0 + offset, -90.0, 180.0 + offset, 90.0)
        clipped = geometry.intersection(window)
        if clipped.is_empty:
            continue
        shifted = shift_longitude(clipped, -offset)
        pieces.extend(iter_polygons(shifted))
    return pieces


def geodesic_disk(center: Coord, radius_m: float, vertices: int = 64) -> Polygon:
    """Approximate a circle of radius_m metres on the WGS84 ellipsoid.

    Longitudes are unwrapped relative to the center so a disk that
    straddles the antimeridian stays a single simple polygon.

    Args:
        center: (lng, lat) of the disk center.
        radius_m: Radius in metres.
        vertices: Number of ring vertices.

    Returns:
        Polygon approximating the disk.
    """
    lng, lat = center
    azimuths = np.linspace(0.0, 360.0, num=vertices, endpoint=False)
    lngs, lats, _ = GEOD.fwd(
        np.full(vertices, lng),
        np.full(vertices, lat),
        azimuths,
        np.full(vertices, radius_m),
    )
    # Re-center longitudes on the disk center
    lngs = lng + (np.asarray(lngs) - lng + 180.0) % 360.0 - 180.0
    return Polygon(zip(lngs.tolist(), np.asarray(lats).tolist(), strict=True))


def feature(geometry: BaseGeometry, properties: dict[str, Any] | None = None) -> dict[str, Any]:
    """Wrap a geometry as a GeoJSON Feature."""
    return {
        "type": "Feature",
        "geometry": mapping(geometry),
        "properties": properties or {},
    }


def feature_collection(features: Iterable[dict[str, Any]] = ()) -> dict[str, Any]:
    """Wrap features as a GeoJSON FeatureCollection."""
    return {"type": "FeatureCollection", "features": list(features)}
