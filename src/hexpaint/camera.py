"""Camera position persistence.

The camera is remembered as a short "lng,lat,zoom" string (two decimals
each), suitable for a URL fragment, so a reload or a shared link reopens
the same view.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from typing import Self

from pydantic import BaseModel, Field

from hexpaint.config import settings
from hexpaint.scheduling import SchedulerProtocol, TimerHandle

logger = logging.getLogger(__name__)

DEFAULT_LNG = -87.8
DEFAULT_LAT = 41.9
DEFAULT_ZOOM = 10.0

PositionSink = Callable[[str], None]


class CameraPosition(BaseModel, frozen=True):
    """Center and zoom of the map camera."""

    lng: float = DEFAULT_LNG
    lat: float = Field(default=DEFAULT_LAT, ge=-90, le=90)
    zoom: float = Field(default=DEFAULT_ZOOM, ge=0)

    def to_hash(self) -> str:
        """Format as "lng,lat,zoom" with two decimals per component."""
        return ",".join(f"{value:.2f}" for value in (self.lng, self.lat, self.zoom))

    @classmethod
    def from_hash(cls, text: str | None, default: CameraPosition | None = None) -> Self:
        """Parse a "lng,lat,zoom" string.

        A leading "#" is ignored. Each missing, unparsable or out-of-range
        component falls back to the matching component of default.

        Example:
            >>> CameraPosition.from_hash("#10.5,20.25")
            CameraPosition(lng=10.5, lat=20.25, zoom=10.0)
        """
        base = default or cls()
        parts = (text or "").lstrip("#").split(",")

        lng = _parse_component(parts, 0, base.lng)
        lat = _parse_component(parts, 1, base.lat)
        zoom = _parse_component(parts, 2, base.zoom)
        if not -90 <= lat <= 90:
            lat = base.lat
        if zoom < 0:
            zoom = base.zoom
        return cls(lng=lng, lat=lat, zoom=zoom)


def _parse_component(parts: list[str], index: int, fallback: float) -> float:
    if index >= len(parts):
        return fallback
    try:
        value = float(parts[index].strip())
    except ValueError:
        return fallback
    return value if math.isfinite(value) else fallback


class PositionRecorder:
    """Writes the camera position to a sink once the camera settles.

    Every record() restarts the debounce timer; only the last position of
    a burst reaches the sink.

    Usage:
        recorder = PositionRecorder(scheduler, sink=lambda text: ...)
        grid = H3GridLayer(scheduler=scheduler, position_recorder=recorder)
    """

    def __init__(
        self,
        scheduler: SchedulerProtocol,
        sink: PositionSink,
        debounce_ms: float | None = None,
    ) -> None:
        self._scheduler = scheduler
        self._sink = sink
        self._debounce_ms = settings.POSITION_DEBOUNCE_MS if debounce_ms is None else debounce_ms
        self._pending: CameraPosition | None = None
        self._timer: TimerHandle | None = None
        self._last_written: str | None = None

    @property
    def pending(self) -> CameraPosition | None:
        return self._pending

    @property
    def last_written(self) -> str | None:
        return self._last_written

    def record(self, position: CameraPosition) -> None:
        self._pending = position
        self._scheduler.cancel(self._timer)
        self._timer = self._scheduler.schedule(self._debounce_ms, self.flush)

    def flush(self) -> None:
        """Write the pending position now, if any."""
        self._scheduler.cancel(self._timer)
        self._timer = None
        position = self._pending
        if position is None:
            return
        self._pending = None
        text = position.to_hash()
        if text == self._last_written:
            return
        logger.debug("Recording camera position %s", text)
        self._sink(text)
        self._last_written = text
