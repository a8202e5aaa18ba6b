"""hexpaint configuration using pydantic-settings.

All configuration is strongly typed and supports environment variables
and .env files.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables or .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: Literal["console", "json"] = "console"

    # Zoom -> H3 resolution mapping
    MAX_ZOOM: float = Field(default=22.0, gt=0)  # Highest map zoom level
    MAX_RESOLUTION: int = Field(default=15, ge=0, le=15)  # Finest H3 resolution

    # Grid construction
    VIEWPORT_SAMPLES_PER_SIDE: int = Field(default=3, ge=1)
    CHUNK_SCALE: float = Field(default=0.1, gt=0, le=1)  # Viewport shrink factor
    CLOSE_TO_POLE_LATITUDE: float = Field(default=85.0, gt=0, le=90)

    # Gestures and timers (milliseconds)
    LONG_PRESS_MS: int = Field(default=500, ge=0)
    MOVE_THROTTLE_MS: int = Field(default=500, ge=0)  # Cool-down after a redraw
    MOVE_FINISH_MS: int = Field(default=100, ge=0)  # Delay of the trailing redraw
    POSITION_DEBOUNCE_MS: int = Field(default=250, ge=0)

    # Selection
    CONTAINS_DISK_VERTICES: int = Field(default=64, ge=8)


# Singleton instance for import convenience
settings = Settings()
