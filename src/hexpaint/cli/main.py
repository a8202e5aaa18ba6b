"""hexpaint CLI.

Command-line access to the grid and selection engines without a browser:
grids are built for a north-up viewport fitted to a bounding box, and
selections are painted from a list of points.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated

import typer

from hexpaint import __version__
from hexpaint.config import settings
from hexpaint.geometry.primitives import GeoPoint
from hexpaint.grid.builder import GridEngine
from hexpaint.grid.viewport import sample_viewport
from hexpaint.map.static import StaticMapView
from hexpaint.selection.selection_set import SelectionSet
from hexpaint.utils.logging import configure_logging, get_logger

app = typer.Typer(
    name="hexpaint",
    help="hexpaint: H3 grid overlay and cell selection painting",
    add_completion=False,
)


# =============================================================================
# Commands
# =============================================================================


@app.command()
def version(
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show version information."""
    if json_output:
        typer.echo(json.dumps({"version": __version__}))
    else:
        typer.echo(f"hexpaint {__version__}")


@app.command()
def resolution(
    zoom: Annotated[float, typer.Argument(help="Map zoom level")],
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
) -> None:
    """Show the H3 resolution drawn at a zoom level."""
    res = GridEngine.from_settings().resolution_for_zoom(zoom)
    if json_output:
        typer.echo(json.dumps({"zoom": zoom, "resolution": res}))
    else:
        typer.echo(f"zoom {zoom:g} -> resolution {res}")


@app.command()
def grid(
    bbox: Annotated[
        str,
        typer.Option("--bbox", help="Viewport as west,south,east,north in degrees"),
    ],
    zoom: Annotated[float, typer.Option("--zoom", "-z", help="Map zoom level")],
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Write the FeatureCollection to this file"),
    ] = None,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"
        ),
    ] = 0,
) -> None:
    """Build the grid for a viewport and print it as GeoJSON."""
    _configure_logging(verbose)
    logger = get_logger(__name__)

    try:
        west, south, east, north = _parse_floats(bbox, count=4, what="bbox")
        view = StaticMapView.fit_bounds((west, south, east, north), zoom)
        polygon = sample_viewport(
            view.unproject, view.get_canvas_size(), settings.VIEWPORT_SAMPLES_PER_SIDE
        )
        engine = GridEngine.from_settings()
        result = engine.build(polygon, zoom)
        logger.info(
            "Grid built",
            cells=len(result.cells),
            resolution=result.resolution,
            chunk_size=result.chunk_size,
        )

        payload = json.dumps(result.to_geojson())
        if output is not None:
            output.write_text(payload)
            typer.echo(
                f"Wrote {len(result.cells)} cells at resolution {result.resolution} to {output}"
            )
        else:
            typer.echo(payload)
    except Exception as e:
        logger.exception("Grid build failed")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


@app.command()
def select(
    points: Annotated[
        list[str],
        typer.Argument(help="Points as lng,lat; the cell under each one is added"),
    ],
    zoom: Annotated[float, typer.Option("--zoom", "-z", help="Map zoom level")],
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity (-v, -vv)"
        ),
    ] = 0,
) -> None:
    """Paint the cells under the given points and print the selection."""
    _configure_logging(verbose)
    logger = get_logger(__name__)

    try:
        res = GridEngine.from_settings().resolution_for_zoom(zoom)
        selection = SelectionSet(disk_vertices=settings.CONTAINS_DISK_VERTICES)
        for text in points:
            lng, lat = _parse_floats(text, count=2, what="point")
            geo = GeoPoint(lng=lng, lat=lat)
            selection.add(selection.index.point_to_cell(geo.lng, geo.lat, res))
        logger.info("Selection built", points=len(points), resolution=res)
        typer.echo(json.dumps(selection.to_geojson()))
    except Exception as e:
        logger.exception("Selection failed")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from None


# =============================================================================
# Helper Functions
# =============================================================================


def _configure_logging(verbose: int) -> None:
    """Configure logging based on verbosity level."""
    if verbose == 0:
        level = "WARNING"
    elif verbose == 1:
        level = "INFO"
    else:
        level = "DEBUG"

    configure_logging(level=level)


def _parse_floats(text: str, *, count: int, what: str) -> list[float]:
    parts = [part.strip() for part in text.split(",")]
    if len(parts) != count:
        raise ValueError(f"Invalid {what} {text!r}: expected {count} comma-separated numbers")
    try:
        return [float(part) for part in parts]
    except ValueError:
        raise ValueError(f"Invalid {what} {text!r}: not a number") from None


if __name__ == "__main__":  # pragma: no cover
    app()
