"""
Configuration Tests
===================

YAML loading, environment overrides and conversion to engine types.
"""

import pytest
from pydantic import ValidationError

from torque_grid.config import Settings, load_config
from torque_grid.engine import RasterEngine
from torque_grid.models import BoundingBox, GridSpec
from torque_grid.parallel import ExecutorKind


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove TORQUE_* overrides from the environment."""
    for name in (
        "TORQUE_WORKERS",
        "TORQUE_EXECUTOR",
        "TORQUE_RESOLUTION",
        "TORQUE_CELL_SIZE",
        "TORQUE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    """Tests for default settings."""

    def test_reference_tile(self):
        """Verify defaults describe the reference 256x256 tile."""
        settings = Settings()

        assert settings.grid.resolution == 256
        assert settings.grid.cell_size == pytest.approx(152.874056570353)
        assert settings.bbox.min_x == pytest.approx(4970241.3272153)
        assert settings.bbox.max_y == pytest.approx(-8218509.28122215)
        assert settings.workers.count == 4
        assert settings.workers.executor == ExecutorKind.THREAD
        assert settings.normalization.base == 15
        assert settings.normalization.range == 240
        assert settings.normalization.gamma == pytest.approx(0.4)
        assert settings.output.maxval == 256

    def test_conversions(self):
        """Verify config sections convert to engine types."""
        settings = Settings()

        assert isinstance(settings.bbox.to_bbox(), BoundingBox)
        assert settings.grid.to_spec() == GridSpec(256, 152.874056570353)
        assert settings.normalization.to_params().peak == 255


class TestLoadConfig:
    """Tests for load_config()."""

    def test_yaml_file(self, sample_config_yaml):
        """Verify values are read from YAML."""
        settings = load_config(str(sample_config_yaml))

        assert settings.grid.resolution == 2
        assert settings.grid.cell_size == 5.0
        assert settings.bbox.max_x == 10.0
        assert settings.workers.count == 2

    def test_env_overrides_yaml(self, sample_config_yaml, monkeypatch):
        """Verify environment variables take precedence."""
        monkeypatch.setenv("TORQUE_WORKERS", "8")
        monkeypatch.setenv("TORQUE_EXECUTOR", "process")
        monkeypatch.setenv("TORQUE_LOG_LEVEL", "DEBUG")

        settings = load_config(str(sample_config_yaml))

        assert settings.workers.count == 8
        assert settings.workers.executor == ExecutorKind.PROCESS
        assert settings.logging.level == "DEBUG"
        assert settings.grid.resolution == 2

    def test_missing_explicit_file(self, tmp_path):
        """Verify an explicit path must exist."""
        with pytest.raises(FileNotFoundError):
            load_config(str(tmp_path / "nope.yaml"))

    def test_empty_yaml_uses_defaults(self, tmp_path):
        """Verify an empty file behaves like no file."""
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert load_config(str(path)).grid.resolution == 256

    @pytest.mark.parametrize(
        "body",
        [
            "grid:\n  resolution: 0\n",
            "grid:\n  cell_size: -1\n",
            "workers:\n  count: -1\n",
            "workers:\n  executor: fibers\n",
            "bbox:\n  min_x: 10\n  max_x: 0\n",
            "normalization:\n  gamma: 0\n",
            "logging:\n  format: xml\n",
            "logging:\n  level: LOUD\n",
        ],
    )
    def test_invalid_values_rejected(self, tmp_path, body):
        """Verify misconfiguration fails at load time."""
        path = tmp_path / "config.yaml"
        path.write_text(body)

        with pytest.raises(ValidationError):
            load_config(str(path))

    def test_engine_from_settings(self, sample_config_yaml):
        """Verify an engine can be built straight from settings."""
        engine = RasterEngine.from_settings(load_config(str(sample_config_yaml)))

        assert engine.spec == GridSpec(2, 5.0)
        assert engine.bbox == BoundingBox(0.0, 0.0, 10.0, 10.0)
        assert engine.workers == 2
        assert engine.executor == ExecutorKind.THREAD

    def test_log_level_is_case_insensitive(self, tmp_path):
        """Verify lowercase level names are accepted and normalized."""
        path = tmp_path / "config.yaml"
        path.write_text("logging:\n  level: debug\n  format: json\n")

        settings = load_config(str(path))

        assert settings.logging.level == "DEBUG"
        assert settings.logging.format == "json"
