"""Custom exceptions for terrain analysis."""


class TerrainError(Exception):
    """Base exception for terrain errors."""

    pass


class HeightmapSizeError(TerrainError, ValueError):
    """Raised when heightmap data length doesn't match its declared resolution."""

    def __init__(self, length: int, data_resolution: int):
        self.length = length
        self.data_resolution = data_resolution
        super().__init__(
            f"Heightmap data size mismatch: got {length} samples, "
            f"expected {data_resolution * data_resolution} "
            f"for resolution {data_resolution}"
        )


class ConfigError(TerrainError):
    """Raised when an analysis config file fails validation."""

    pass
