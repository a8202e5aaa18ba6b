"""Shared pytest fixtures and configuration."""

from collections.abc import Iterator

import pytest

from hexpaint.config import Settings
from hexpaint.geometry.primitives import CanvasSize, GeoPoint
from hexpaint.grid.index import H3CellIndex
from hexpaint.map.static import StaticMapView
from hexpaint.scheduling import ManualScheduler
from hexpaint.utils.logging import clear_correlation_context, configure_logging

# Camera the demo opens on when no position is remembered
CHICAGO = GeoPoint(lng=-87.8, lat=41.9)


@pytest.fixture(autouse=True)
def reset_logging_context() -> Iterator[None]:
    """Reset correlation context between tests."""
    clear_correlation_context()
    yield
    clear_correlation_context()


@pytest.fixture
def test_settings() -> Settings:
    """Create a Settings instance with test-safe defaults."""
    return Settings(
        LOG_LEVEL="DEBUG",
        LOG_FORMAT="console",
    )


@pytest.fixture
def configure_test_logging() -> Iterator[None]:
    """Configure logging for tests with console output."""
    configure_logging(level="DEBUG", log_format="console")
    yield


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture(scope="session")
def index() -> H3CellIndex:
    return H3CellIndex()


@pytest.fixture
def static_map() -> StaticMapView:
    """A small north-up map over Chicago at zoom 10."""
    return StaticMapView(center=CHICAGO, zoom=10, canvas=CanvasSize(width=400, height=300))
