"""End-to-end painting sessions on the in-memory map.

A session wires the selection layer, its grid and a position recorder to
one StaticMapView and drives them only through map events and the
manual clock, the way a browser host would.
"""

from __future__ import annotations

import h3
import pytest

from hexpaint.camera import PositionRecorder
from hexpaint.geometry import CanvasSize, GeoPoint, ScreenPoint
from hexpaint.grid import H3CellIndex
from hexpaint.layers import H3GridLayer, H3SelectionLayer
from hexpaint.map import POINTERDOWN, POINTERMOVE, POINTERUP, REMOVE, MapEvent, StaticMapView
from hexpaint.scheduling import ManualScheduler
from hexpaint.selection import DEFAULT_LONG_PRESS_MS

pytestmark = pytest.mark.integration


class Session:
    """A map with a selection layer and a remembered camera."""

    def __init__(self, center: GeoPoint, zoom: float) -> None:
        self.scheduler = ManualScheduler()
        self.map = StaticMapView(
            center=center, zoom=zoom, canvas=CanvasSize(width=800, height=600)
        )
        self.hashes: list[str] = []
        self.recorder = PositionRecorder(self.scheduler, self.hashes.append)
        grid = H3GridLayer(scheduler=self.scheduler, position_recorder=self.recorder)
        self.layer = H3SelectionLayer(grid)
        self.layer.add_to(self.map)

    def screen_of(self, cell: str) -> ScreenPoint:
        lat, lng = h3.cell_to_latlng(cell)
        return self.map.project(GeoPoint(lng=lng, lat=lat))

    def tap(self, point: ScreenPoint) -> None:
        self.map.emit(MapEvent(type=POINTERDOWN, point=point))
        self.map.emit(MapEvent(type=POINTERUP, point=point))

    def paint_path(self, cells: list[str]) -> None:
        self.map.emit(MapEvent(type=POINTERDOWN, point=self.screen_of(cells[0])))
        self.scheduler.advance(DEFAULT_LONG_PRESS_MS)
        for cell in cells:
            self.map.emit(MapEvent(type=POINTERMOVE, point=self.screen_of(cell)))
        self.map.emit(MapEvent(type=POINTERUP))

    def grid_features(self) -> list[dict]:
        return self.map.sources[self.layer.grid.source_id]["features"]


def test_paint_zoom_and_erase_over_chicago(index: H3CellIndex) -> None:
    session = Session(GeoPoint(lng=-87.8, lat=41.9), zoom=10)
    selection = session.layer.selection

    start = index.point_to_cell(-87.8, 41.9, 7)
    assert start in {feature["properties"]["id"] for feature in session.grid_features()}

    # Tap the cell under the camera
    session.tap(ScreenPoint(x=400, y=300))
    assert selection.contains(start)

    # Long-press on a neighbour and drag along the ring
    ring = list(h3.grid_ring(start, 1))
    session.paint_path(ring[:3])
    for cell in ring[:3]:
        assert selection.contains(cell)
    assert not selection.contains(ring[4])
    assert session.map.drag_pan_enabled() is True
    painted = selection.geometry
    assert painted is not None

    # Zooming in redraws the grid one resolution finer
    session.map.jump_to(zoom=11.5)
    assert session.layer.grid.resolution == 8
    assert {h3.get_resolution(f["properties"]["id"]) for f in session.grid_features()} == {8}
    assert selection.geometry is painted

    # A tap now erases a finer cell out of the painted area
    child = h3.cell_to_center_child(start, 8)
    session.tap(session.screen_of(child))
    erased = selection.geometry
    assert erased is not None
    assert erased.area < painted.area
    assert selection.contains(start)

    # The camera is remembered once it settles
    session.scheduler.run_all()
    assert session.hashes == ["-87.80,41.90,11.50"]

    # Removing the map tears everything down
    session.map.emit(MapEvent(type=REMOVE))
    assert session.map.layers == {}
    assert session.map.sources == {}
    assert session.map.listener_count(POINTERDOWN) == 0
    assert session.scheduler.pending == 0


def test_paint_across_the_antimeridian(index: H3CellIndex) -> None:
    session = Session(GeoPoint(lng=180.0, lat=0.0), zoom=5)
    selection = session.layer.selection

    features = session.grid_features()
    assert session.layer.grid.resolution == 3
    assert any(f["properties"].get("crossesAntimeridian") for f in features)
    ids = [f["properties"]["id"] for f in features]
    assert len(ids) == len(set(ids))

    cell = index.point_to_cell(180.0, 0.0, 3)
    session.tap(ScreenPoint(x=400, y=300))
    assert selection.contains(cell)
    assert selection.geometry is not None
    assert selection.geometry.is_valid

    session.tap(ScreenPoint(x=400, y=300))
    assert selection.is_empty


def test_hidden_pole_cells_are_flagged() -> None:
    session = Session(GeoPoint(lng=0.0, lat=84.0), zoom=4)
    flagged = [f for f in session.grid_features() if f["properties"].get("closeToPole")]
    assert flagged
    lines = session.map.layers[session.layer.grid.lines_layer_id]
    assert lines["filter"] == ["!", ["has", "closeToPole"]]
