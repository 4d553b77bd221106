"""Shared test fixtures for terrain tests."""

import pytest

from longhome.terrain.chunk import TerrainChunk
from longhome.terrain.heightmaps import (
    generate_cliff_heightmap,
    generate_flat_heightmap,
    generate_mountain_heightmap,
    generate_slope_heightmap,
)


def _analyzed_chunk(heightmap, resolution: int, chunk_size: float = 64.0) -> TerrainChunk:
    chunk = TerrainChunk((0, 0), chunk_size, resolution)
    chunk.load_heightmap(heightmap, resolution)
    chunk.analyze()
    return chunk


@pytest.fixture
def flat_chunk() -> TerrainChunk:
    """16x16 chunk over 64 units at constant elevation 3000."""
    return _analyzed_chunk(generate_flat_heightmap(16, 3000.0), 16)


@pytest.fixture
def slope_chunk() -> TerrainChunk:
    """16x16 chunk over 64 units with a uniform 30 degree slope toward +Z."""
    return _analyzed_chunk(generate_slope_heightmap(16, 3000.0, 30.0), 16)


@pytest.fixture
def cliff_chunk() -> TerrainChunk:
    """16x16 chunk over 64 units with a 200 unit cliff band at row 8.

    Rows 7, 8 and 9 straddle the drop and classify as cliff.
    """
    return _analyzed_chunk(generate_cliff_heightmap(16, 3000.0, 0.5), 16)


@pytest.fixture
def mountain_chunk() -> TerrainChunk:
    """32x32 chunk over 256 units with a seeded mountain."""
    heightmap = generate_mountain_heightmap(32, 2800.0, seed=123, chunk_size=256.0)
    return _analyzed_chunk(heightmap, 32, chunk_size=256.0)
