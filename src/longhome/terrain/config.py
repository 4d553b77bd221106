"""Terrain analysis configuration models."""

import tomllib
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from ..exceptions import ConfigError
from ..terrain_types import SurfaceType

# Friction used for surfaces missing from the table
DEFAULT_FRICTION = 0.5


class SlopeThresholds(BaseModel, frozen=True):
    """Slope angle thresholds in degrees."""

    walkable_max: float = Field(default=25.0, description="Upper bound of walkable slope")
    slide_min: float = Field(
        default=25.0, gt=0, description="Lower bound of slideable slope"
    )
    slide_max: float = Field(default=40.0, description="Upper bound of slideable slope")
    downclimb_min: float = Field(default=35.0, description="Lower bound of downclimb slope")
    downclimb_max: float = Field(default=50.0, description="Upper bound of downclimb slope")
    rappel_min: float = Field(default=50.0, description="Slope where a rappel is required")
    cliff_min: float = Field(default=70.0, description="Slope treated as cliff face")


class HazardConfig(BaseModel, frozen=True):
    """Exit zone and slide risk parameters."""

    exit_curvature_max: float = Field(
        default=0.2, description="Curvature must be below this for an exit zone"
    )
    exit_min_cliff_distance: float = Field(
        default=10.0, description="Exit zones must be farther than this from a cliff"
    )
    exit_quality_falloff: float = Field(
        default=50.0, gt=0, description="Cliff distance at which exit quality saturates"
    )
    slide_angle_span: float = Field(
        default=15.0, gt=0, description="Degrees above slide_min for full angle contribution"
    )
    slide_angle_weight: float = Field(
        default=0.3, description="Slide risk weight of slope steepness"
    )
    cliff_proximity_range: float = Field(
        default=50.0, gt=0, description="Cliff distance below which slide risk increases"
    )
    cliff_proximity_weight: float = Field(
        default=0.5, description="Slide risk weight of cliff proximity"
    )
    ice_weight: float = Field(default=0.2, description="Slide risk weight of ice probability")


class GeometryConfig(BaseModel, frozen=True):
    """Numerical parameters of the gradient and cliff-distance passes."""

    gradient_epsilon: float = Field(
        default=1e-3, description="Gradients at or below this are treated as flat"
    )
    drainage_scale: float = Field(
        default=10.0, description="Multiplier from negative curvature to drainage"
    )
    cliff_direction_epsilon: float = Field(
        default=1e-3, description="Cliff distances at or below this get no direction"
    )
    no_cliff_distance: float = Field(
        default=1000.0, description="Distance reported when no cliff is nearer"
    )
    cliff_search_block: int = Field(
        default=256, gt=0, description="Cells per block in the cliff distance scan"
    )


def _default_friction() -> dict[SurfaceType, float]:
    return {
        SurfaceType.SNOW_FIRM: 0.3,
        SurfaceType.SNOW_SOFT: 0.5,
        SurfaceType.SNOW_POWDER: 0.6,
        SurfaceType.ICE: 0.1,
        SurfaceType.ROCK: 0.6,
        SurfaceType.ROCK_DRY: 0.7,
        SurfaceType.ROCK_WET: 0.2,
        SurfaceType.SCREE: 0.6,
        SurfaceType.MIXED: 0.4,
    }


class TerrainAnalysisConfig(BaseModel, frozen=True):
    """Complete terrain analysis configuration."""

    thresholds: SlopeThresholds = Field(default_factory=SlopeThresholds)
    hazard: HazardConfig = Field(default_factory=HazardConfig)
    geometry: GeometryConfig = Field(default_factory=GeometryConfig)
    friction: dict[SurfaceType, float] = Field(
        default_factory=_default_friction, description="Friction per surface type"
    )


DEFAULT_ANALYSIS_CONFIG = TerrainAnalysisConfig()


def load_analysis_config(config_path: Path) -> TerrainAnalysisConfig:
    """Load analysis configuration from a TOML file.

    Sections may be partial; missing fields keep their defaults. A
    ``[friction]`` table replaces the whole friction table, so surfaces
    left out of it fall back to DEFAULT_FRICTION.

    Args:
        config_path: Path to the TOML config file.

    Returns:
        Parsed TerrainAnalysisConfig.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        tomllib.TOMLDecodeError: If TOML is malformed.
        ConfigError: If values fail validation.
    """
    with open(config_path, "rb") as f:
        data = tomllib.load(f)
    try:
        return TerrainAnalysisConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid analysis config {config_path}: {e}") from e
