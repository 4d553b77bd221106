"""Heightfield terrain analysis package.

This package derives slope, curvature, cliff proximity and gameplay
classification (walkability, slide risk, exit zones) for terrain chunks,
and provides synthetic heightmap generators to drive the pipeline.
"""

from .cell import TerrainCell
from .chunk import ChunkSummary, TerrainChunk
from .classification import surface_friction, zone_from_slope
from .config import (
    DEFAULT_ANALYSIS_CONFIG,
    GeometryConfig,
    HazardConfig,
    SlopeThresholds,
    TerrainAnalysisConfig,
    load_analysis_config,
)
from .heightmaps import (
    generate_cliff_heightmap,
    generate_flat_heightmap,
    generate_mountain_heightmap,
    generate_slope_heightmap,
)
from .validation import ValidationResult, validate_chunk

__all__ = [
    "ChunkSummary",
    "DEFAULT_ANALYSIS_CONFIG",
    "GeometryConfig",
    "HazardConfig",
    "SlopeThresholds",
    "TerrainAnalysisConfig",
    "TerrainCell",
    "TerrainChunk",
    "ValidationResult",
    "generate_cliff_heightmap",
    "generate_flat_heightmap",
    "generate_mountain_heightmap",
    "generate_slope_heightmap",
    "load_analysis_config",
    "surface_friction",
    "validate_chunk",
    "zone_from_slope",
]
