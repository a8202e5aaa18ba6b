"""Custom exceptions for hexpaint.

Every failure in the grid and selection engines is recoverable: callers
catch these and keep the previously rendered state.
"""

from __future__ import annotations


class HexPaintError(Exception):
    """Base exception for all hexpaint errors."""

    def __init__(self, message: str) -> None:
        """Initialize the error.

        Args:
            message: Human-readable error description.
        """
        self.message = message
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        return self.message


class ViewportUnavailable(HexPaintError):
    """Raised when the visible map area cannot be projected to the globe.

    This error is raised when:
    - The camera looks (partly) off the globe
    - The canvas is not ready and the projection fails
    - The projection returns non-finite coordinates
    """

    def __init__(
        self,
        message: str,
        *,
        screen_point: tuple[float, float] | None = None,
    ) -> None:
        """Initialize with the screen point that failed to project.

        Args:
            message: Human-readable error description.
            screen_point: (x, y) CSS pixel position that could not be unprojected.
        """
        self.screen_point = screen_point
        super().__init__(message)

    def _format_message(self) -> str:
        if self.screen_point is not None:
            return f"{self.message} (screen_point={self.screen_point})"
        return self.message


class DegenerateChunk(HexPaintError):
    """Raised when a chunk would have a zero or negative side length."""

    def __init__(self, message: str, *, side: float) -> None:
        """Initialize with the offending side length.

        Args:
            message: Human-readable error description.
            side: Computed chunk side in degrees.
        """
        self.side = side
        super().__init__(message)

    def _format_message(self) -> str:
        return f"{self.message} (side={self.side})"
