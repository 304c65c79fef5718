"""
torque-grid Configuration
=========================

This module handles configuration loading for the aggregation engine.

Configuration Sources (in order of precedence):
    1. Environment variables (highest priority)
    2. config.yaml file
    3. Default values (lowest priority)

Environment Variable Mapping:
    TORQUE_WORKERS     -> workers.count
    TORQUE_EXECUTOR    -> workers.executor
    TORQUE_RESOLUTION  -> grid.resolution
    TORQUE_CELL_SIZE   -> grid.cell_size
    TORQUE_LOG_LEVEL   -> logging.level

Defaults reproduce the reference 256x256 web-mercator tile.

Example:
    from torque_grid.config import load_config

    settings = load_config()
    print(settings.grid.resolution)
    print(settings.workers.count)
"""

import os
import sys
import logging
from pathlib import Path
from typing import Literal, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from torque_grid.aggregation.normalize import BASE, GAMMA, RANGE, NormalizationParams
from torque_grid.models.geometry import BoundingBox, GridSpec
from torque_grid.parallel.scheduler import ExecutorKind


logger = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_LOG_FORMATS = {
    "json": (
        '{"time": "%(asctime)s", "level": "%(levelname)s", '
        '"module": "%(name)s", "message": "%(message)s"}'
    ),
    "text": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
}


# =============================================================================
# Configuration Models
# =============================================================================

class BoundingBoxConfig(BaseModel):
    """Spatial extent of the tile (map units, exclusive edges)."""

    min_x: float = Field(default=4970241.3272153, description="Lower x bound")
    min_y: float = Field(default=-8257645.03970416, description="Lower y bound")
    max_x: float = Field(default=5009377.08569731, description="Upper x bound")
    max_y: float = Field(default=-8218509.28122215, description="Upper y bound")

    @model_validator(mode="after")
    def check_extent(self) -> "BoundingBoxConfig":
        """Ensure the box is non-empty on both axes."""
        if self.max_x <= self.min_x or self.max_y <= self.min_y:
            raise ValueError("bbox max must exceed min on both axes")
        return self

    def to_bbox(self) -> BoundingBox:
        return BoundingBox(self.min_x, self.min_y, self.max_x, self.max_y)


class GridConfig(BaseModel):
    """Grid layout."""

    resolution: int = Field(
        default=256,
        ge=1,
        description="Side length of the square grid in cells",
    )
    cell_size: float = Field(
        default=152.874056570353,
        gt=0,
        description="Cell width/height in map units (not re-derived per axis)",
    )

    def to_spec(self) -> GridSpec:
        return GridSpec(resolution=self.resolution, cell_size=self.cell_size)


class WorkersConfig(BaseModel):
    """Partition scheduling configuration."""

    count: int = Field(
        default=4,
        ge=0,
        description="Number of partitions (0 or 1 = single pass)",
    )
    executor: ExecutorKind = Field(
        default=ExecutorKind.THREAD,
        description="Unit of concurrency: 'thread' or 'process'",
    )


class NormalizationConfig(BaseModel):
    """Display mapping constants."""

    base: int = Field(default=BASE, ge=0, description="Intensity of empty cells")
    range: int = Field(default=RANGE, ge=0, description="Span above base for the peak cell")
    gamma: float = Field(default=GAMMA, gt=0, description="Gamma exponent")

    def to_params(self) -> NormalizationParams:
        return NormalizationParams(base=self.base, range=self.range, gamma=self.gamma)


class OutputConfig(BaseModel):
    """Greymap output configuration."""

    maxval: int = Field(
        default=256,
        ge=1,
        le=65535,
        description="Max grey value written in the PGM header",
    )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", description="Log level name")
    format: Literal["json", "text"] = Field(
        default="text",
        description="Log format: json or text",
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Ensure the level names a standard logging level."""
        level = v.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"unknown log level {v!r}, expected one of {_LOG_LEVELS}")
        return level


class Settings(BaseModel):
    """
    Main settings class for torque-grid.

    Loads configuration from YAML file and environment variables.
    Environment variables take precedence over file values.
    """

    bbox: BoundingBoxConfig = Field(default_factory=BoundingBoxConfig)
    grid: GridConfig = Field(default_factory=GridConfig)
    workers: WorkersConfig = Field(default_factory=WorkersConfig)
    normalization: NormalizationConfig = Field(default_factory=NormalizationConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# =============================================================================
# Configuration Loading
# =============================================================================

def load_config(config_path: Optional[str] = None) -> Settings:
    """
    Load configuration from YAML file and environment variables.

    Priority (highest to lowest):
        1. Environment variables
        2. YAML config file
        3. Default values

    Args:
        config_path: Path to config.yaml. If None, searches common locations.

    Returns:
        Settings: Loaded configuration

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        pydantic.ValidationError: If values are out of range
    """
    if config_path is not None and not Path(config_path).exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    # Find config file
    if config_path is None:
        search_paths = [
            Path("config.yaml"),
            Path("config.yml"),
            Path(__file__).parent.parent.parent / "config.yaml",
        ]
        for path in search_paths:
            if path.exists():
                config_path = str(path)
                break

    # Load from YAML if exists
    config_data = {}
    if config_path:
        logger.info(f"Loading config from: {config_path}")
        with open(config_path, "r") as f:
            config_data = yaml.safe_load(f) or {}
    else:
        logger.debug("No config file found, using defaults and environment variables")

    # Apply environment variable overrides
    _apply_env_overrides(config_data)

    return Settings.model_validate(config_data)


def _apply_env_overrides(config_data: dict) -> None:
    """Apply environment variable overrides to config data."""

    # Worker settings
    if env_workers := os.environ.get("TORQUE_WORKERS"):
        config_data.setdefault("workers", {})["count"] = int(env_workers)
    if env_executor := os.environ.get("TORQUE_EXECUTOR"):
        config_data.setdefault("workers", {})["executor"] = env_executor

    # Grid settings
    if env_res := os.environ.get("TORQUE_RESOLUTION"):
        config_data.setdefault("grid", {})["resolution"] = int(env_res)
    if env_cell := os.environ.get("TORQUE_CELL_SIZE"):
        config_data.setdefault("grid", {})["cell_size"] = float(env_cell)

    # Logging settings
    if env_log := os.environ.get("TORQUE_LOG_LEVEL"):
        config_data.setdefault("logging", {})["level"] = env_log


def setup_logging(settings: Settings) -> None:
    """
    Configure root logging from settings.

    Records go to stderr so that image output on stdout stays clean.
    """
    logging.basicConfig(
        level=getattr(logging, settings.logging.level),
        format=_LOG_FORMATS[settings.logging.format],
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=sys.stderr,
    )
