"""Cell features and local display id allocation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from hexpaint.geometry.geomath import Coord

# Largest integer a JavaScript renderer can address exactly
MAX_DISPLAY_ID = 2**53 - 1


class IdRegistry:
    """Hands out sequential local ids for one engine or layer instance.

    Ids are only meaningful to the renderer (feature-state addressing and
    source/layer naming) and only need to be unique among the objects
    alive at the same time. The counter wraps after MAX_DISPLAY_ID.
    """

    __slots__ = ("_next",)

    def __init__(self, start: int = 0) -> None:
        self._next = start

    def next_id(self) -> int:
        """Return the next id and advance the counter."""
        value = self._next
        self._next = 0 if value >= MAX_DISPLAY_ID else value + 1
        return value

    @property
    def peek(self) -> int:
        """The id the next call to next_id() will return."""
        return self._next


@dataclass(frozen=True, slots=True)
class CellFeature:
    """One grid cell ready to be handed to the renderer.

    Attributes:
        display_id: Local id used for feature-state addressing.
        cell_id: Index id of the cell.
        rings: Closed (lng, lat) rings, exterior first, antimeridian-normalized.
        close_to_pole: Any vertex lies beyond the polar latitude threshold.
        crosses_antimeridian: At least one vertex was rewritten across +/-180.
    """

    display_id: int
    cell_id: str
    rings: tuple[tuple[Coord, ...], ...]
    close_to_pole: bool = False
    crosses_antimeridian: bool = False

    @property
    def exterior(self) -> tuple[Coord, ...]:
        return self.rings[0]

    def to_geojson(self) -> dict[str, Any]:
        """Render as a GeoJSON Feature.

        Flags are only present when set, so renderers can filter with a
        simple ``has`` test.
        """
        properties: dict[str, Any] = {"id": self.cell_id}
        if self.close_to_pole:
            properties["closeToPole"] = True
        if self.crosses_antimeridian:
            properties["crossesAntimeridian"] = True
        return {
            "type": "Feature",
            "id": self.display_id,
            "geometry": {
                "type": "Polygon",
                "coordinates": [[list(coord) for coord in ring] for ring in self.rings],
            },
            "properties": properties,
        }
