"""Long-Home alpine terrain core."""

from .exceptions import ConfigError, HeightmapSizeError, TerrainError
from .terrain_types import SurfaceType, TerrainZone
from .types import GridCoord, Vector3

__all__ = [
    # Types
    "GridCoord",
    "Vector3",
    "SurfaceType",
    "TerrainZone",
    # Exceptions
    "TerrainError",
    "HeightmapSizeError",
    "ConfigError",
]
