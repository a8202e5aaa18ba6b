"""Unit tests for hexpaint.geometry.geomath."""

from __future__ import annotations

import pytest
from shapely.geometry import GeometryCollection, LineString, Point, Polygon, box

from hexpaint.geometry import (
    bbox_size,
    bounding_box,
    buffer_degrees,
    closed_ring,
    difference,
    feature,
    feature_collection,
    geodesic_disk,
    intersects,
    is_antimeridian_side,
    iter_polygons,
    polygon_rings,
    round_half_up,
    scale_about_centroid,
    shift_longitude,
    sign,
    split_at_antimeridian,
    union,
)


class TestScalarHelpers:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(3.2, 1), (-0.1, -1), (0.0, 0), (-0.0, 0), (180.0, 1)],
    )
    def test_sign(self, value: float, expected: int) -> None:
        assert sign(value) == expected

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2), (-0.5, 0), (6.818, 7)],
    )
    def test_round_half_up(self, value: float, expected: int) -> None:
        assert round_half_up(value) == expected

    @pytest.mark.parametrize(
        ("lng", "expected"),
        [(90.0, False), (-90.0, False), (90.1, True), (-179.9, True), (0.0, False)],
    )
    def test_is_antimeridian_side(self, lng: float, expected: bool) -> None:
        assert is_antimeridian_side(lng) is expected


class TestBoundingBoxes:
    def test_bounding_box(self) -> None:
        poly = Polygon([(0, 0), (4, 1), (2, 3)])
        assert bounding_box(poly) == (0.0, 0.0, 4.0, 3.0)

    def test_bbox_size(self) -> None:
        assert bbox_size((-88.0, 41.5, -87.5, 42.0)) == pytest.approx((0.5, 0.5))

    def test_scale_about_centroid(self) -> None:
        scaled = scale_about_centroid(box(0, 0, 10, 10), 0.1)
        assert bounding_box(scaled) == pytest.approx((4.5, 4.5, 5.5, 5.5))

    def test_buffer_degrees_grows_outward(self) -> None:
        grown = buffer_degrees(box(0, 0, 1, 1), 0.5)
        minx, miny, maxx, maxy = bounding_box(grown)
        assert minx == pytest.approx(-0.5)
        assert maxy == pytest.approx(1.5)
        assert grown.contains(box(0, 0, 1, 1))


class TestBooleanOperations:
    def test_union_with_none_returns_other(self) -> None:
        b = box(0, 0, 1, 1)
        assert union(None, b) is b

    def test_union_merges_adjacent(self) -> None:
        merged = union(box(0, 0, 1, 1), box(1, 0, 2, 1))
        assert merged.equals(box(0, 0, 2, 1))

    def test_difference_of_none_is_none(self) -> None:
        assert difference(None, box(0, 0, 1, 1)) is None

    def test_difference_to_empty_is_none(self) -> None:
        assert difference(box(0, 0, 1, 1), box(-1, -1, 2, 2)) is None

    def test_difference_keeps_remaining_area(self) -> None:
        result = difference(box(0, 0, 2, 1), box(1, 0, 2, 1))
        assert result is not None
        assert result.equals(box(0, 0, 1, 1))

    def test_difference_can_split_into_multipolygon(self) -> None:
        result = difference(box(0, 0, 3, 1), box(1, -1, 2, 2))
        assert result is not None
        assert result.geom_type == "MultiPolygon"
        assert result.area == pytest.approx(2.0)

    def test_intersects_none_is_false(self) -> None:
        assert intersects(None, box(0, 0, 1, 1)) is False

    def test_intersects_touching_counts(self) -> None:
        assert intersects(box(0, 0, 1, 1), box(1, 0, 2, 1)) is True

    def test_intersects_disjoint(self) -> None:
        assert intersects(box(0, 0, 1, 1), box(5, 5, 6, 6)) is False

    def test_iter_polygons_drops_lower_dimensions(self) -> None:
        collection = GeometryCollection(
            [Point(0, 0), LineString([(0, 0), (1, 1)]), box(0, 0, 1, 1)]
        )
        polygons = list(iter_polygons(collection))
        assert len(polygons) == 1
        assert polygons[0].equals(box(0, 0, 1, 1))


class TestRings:
    def test_closed_ring_appends_first_vertex(self) -> None:
        assert closed_ring([(0, 0), (1, 0), (1, 1)]) == [
            (0.0, 0.0),
            (1.0, 0.0),
            (1.0, 1.0),
            (0.0, 0.0),
        ]

    def test_closed_ring_leaves_closed_ring_alone(self) -> None:
        ring = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 0.0)]
        assert closed_ring(ring) == ring

    def test_closed_ring_empty(self) -> None:
        assert closed_ring([]) == []

    def test_polygon_rings_includes_holes(self) -> None:
        poly = box(0, 0, 10, 10).difference(box(4, 4, 6, 6))
        rings = polygon_rings(poly)
        assert len(rings) == 2
        assert rings[0][0] == rings[0][-1]


class TestSplitAtAntimeridian:
    def test_polygon_inside_primary_copy_is_unchanged(self) -> None:
        pieces = split_at_antimeridian(box(10, 10, 20, 20))
        assert len(pieces) == 1
        assert pieces[0].equals(box(10, 10, 20, 20))

    def test_polygon_crossing_180_is_split_and_wrapped(self) -> None:
        pieces = split_at_antimeridian(box(170, 0, 190, 10))
        assert len(pieces) == 2
        assert sum(piece.area for piece in pieces) == pytest.approx(200.0)
        for piece in pieces:
            minx, _, maxx, _ = piece.bounds
            assert -180.0 <= minx <= maxx <= 180.0
        assert any(piece.equals(box(-180, 0, -170, 10)) for piece in pieces)

    def test_polygon_crossing_minus_180_is_split(self) -> None:
        pieces = split_at_antimeridian(box(-185, 0, -175, 5))
        assert len(pieces) == 2
        assert any(piece.equals(box(175, 0, 180, 5)) for piece in pieces)

    def test_latitudes_are_clipped(self) -> None:
        pieces = split_at_antimeridian(box(-10, -95, 10, 95))
        assert len(pieces) == 1
        assert bounding_box(pieces[0]) == pytest.approx((-10.0, -90.0, 10.0, 90.0))

    def test_empty_geometry(self) -> None:
        assert split_at_antimeridian(Polygon()) == []


class TestGeodesicDisk:
    def test_disk_contains_center(self) -> None:
        disk = geodesic_disk((-87.8, 41.9), 500.0)
        assert disk.is_valid
        assert disk.contains(Point(-87.8, 41.9))

    def test_disk_radius_is_in_metres(self) -> None:
        disk = geodesic_disk((0.0, 0.0), 1000.0)
        _, miny, _, maxy = disk.bounds
        # One kilometre is roughly 0.009 degrees of latitude
        assert maxy == pytest.approx(0.009, abs=0.0005)
        assert miny == pytest.approx(-0.009, abs=0.0005)

    def test_disk_vertex_count(self) -> None:
        disk = geodesic_disk((0.0, 0.0), 1000.0, vertices=16)
        assert len(disk.exterior.coords) == 17

    def test_disk_across_antimeridian_stays_compact(self) -> None:
        disk = geodesic_disk((179.999, 0.0), 1000.0)
        minx, _, maxx, _ = disk.bounds
        assert disk.is_valid
        assert minx < 180.0 < maxx
        assert maxx - minx < 0.1


class TestGeoJSON:
    def test_feature(self) -> None:
        payload = feature(box(0, 0, 1, 1), {"name": "a"})
        assert payload["type"] == "Feature"
        assert payload["geometry"]["type"] == "Polygon"
        assert payload["properties"] == {"name": "a"}

    def test_feature_without_properties(self) -> None:
        assert feature(box(0, 0, 1, 1))["properties"] == {}

    def test_empty_feature_collection(self) -> None:
        assert feature_collection() == {"type": "FeatureCollection", "features": []}

    def test_feature_collection_consumes_iterables(self) -> None:
        features = (feature(box(i, 0, i + 1, 1)) for i in range(3))
        assert len(feature_collection(features)["features"]) == 3


class TestShiftLongitude:
    def test_zero_offset_returns_same_object(self) -> None:
        poly = box(0, 0, 1, 1)
        assert shift_longitude(poly, 0.0) is poly

    def test_shift_by_world_width(self) -> None:
        assert shift_longitude(box(-180, 0, -179, 1), 360.0).equals(box(180, 0, 181, 1))
