"""Tests for hexpaint.config module."""

import pytest
from pydantic import ValidationError

from hexpaint.config import Settings


class TestSettings:
    """Tests for the Settings class."""

    def test_default_values(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that default values are set correctly."""
        for name in ("LOG_LEVEL", "MAX_ZOOM", "LONG_PRESS_MS", "CHUNK_SCALE"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
        )

        assert settings.LOG_LEVEL == "INFO"
        assert settings.LOG_FORMAT == "console"

        # Zoom 0..22 maps onto resolutions 0..15
        assert settings.MAX_ZOOM == 22.0
        assert settings.MAX_RESOLUTION == 15

        assert settings.VIEWPORT_SAMPLES_PER_SIDE == 3
        assert settings.CHUNK_SCALE == 0.1
        assert settings.CLOSE_TO_POLE_LATITUDE == 85.0

        assert settings.LONG_PRESS_MS == 500
        assert settings.MOVE_THROTTLE_MS == 500
        assert settings.MOVE_FINISH_MS == 100
        assert settings.POSITION_DEBOUNCE_MS == 250
        assert settings.CONTAINS_DISK_VERTICES == 64

    def test_env_var_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that environment variables override defaults."""
        monkeypatch.setenv("LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("LONG_PRESS_MS", "750")
        monkeypatch.setenv("CHUNK_SCALE", "0.25")

        settings = Settings(
            _env_file=None,  # type: ignore[call-arg]
        )

        assert settings.LOG_LEVEL == "DEBUG"
        assert settings.LONG_PRESS_MS == 750
        assert settings.CHUNK_SCALE == 0.25

    def test_env_file(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("MAX_RESOLUTION", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("MAX_RESOLUTION=12\n")

        settings = Settings(
            _env_file=env_file,  # type: ignore[call-arg]
        )

        assert settings.MAX_RESOLUTION == 12

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("MAX_RESOLUTION", 16),
            ("MAX_ZOOM", 0),
            ("CHUNK_SCALE", 0),
            ("CHUNK_SCALE", 1.5),
            ("CLOSE_TO_POLE_LATITUDE", 91),
            ("LONG_PRESS_MS", -1),
            ("CONTAINS_DISK_VERTICES", 4),
            ("LOG_FORMAT", "xml"),
        ],
    )
    def test_rejects_invalid_values(self, field: str, value: object) -> None:
        with pytest.raises(ValidationError):
            Settings(_env_file=None, **{field: value})  # type: ignore[call-arg]
