"""Synthetic heightmap generators for exercising the analysis pipeline.

All generators return flat float64 arrays indexed z * resolution + x, ready
for TerrainChunk.load_heightmap(). Output is fully determined by the
arguments; the mountain generator draws its noise from a seeded
numpy Generator.
"""

import math

import numpy as np
from numpy.typing import NDArray

# Mountain profile shaping
MOUNTAIN_TARGET_GRADIENT = 0.6  # tan(~31 deg) average over the radial profile
MOUNTAIN_NOISE_AMPLITUDE = 0.08
MOUNTAIN_RIDGE_STRENGTH = 0.3
MOUNTAIN_RIDGE_LOBES = 3
MOUNTAIN_VARIATION = 0.2

CLIFF_RIPPLE_AMPLITUDE = 5.0
CLIFF_RIPPLE_FREQUENCY = 0.3


def _grid(resolution: int) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    """Return (zs, xs) index grids shaped (resolution, resolution)."""
    steps = np.arange(resolution, dtype=np.float64)
    zs, xs = np.meshgrid(steps, steps, indexing="ij")
    return zs, xs


def generate_flat_heightmap(
    resolution: int, base_height: float = 3000.0
) -> NDArray[np.float64]:
    """Generate a constant-elevation heightmap."""
    return np.full(resolution * resolution, base_height, dtype=np.float64)


def generate_slope_heightmap(
    resolution: int,
    base_height: float = 3000.0,
    slope_degrees: float = 30.0,
    chunk_size: float = 64.0,
) -> NDArray[np.float64]:
    """Generate a plane descending toward +Z at a fixed angle.

    Args:
        resolution: Samples per side.
        base_height: Elevation of row z = 0.
        slope_degrees: Slope of the plane.
        chunk_size: World size the heightmap will cover, sets row spacing.

    Returns:
        Flat heightmap array.
    """
    drop_per_row = math.tan(math.radians(slope_degrees)) * (chunk_size / resolution)
    zs, _ = _grid(resolution)
    heights = base_height - zs * drop_per_row
    return heights.reshape(-1)


def generate_cliff_heightmap(
    resolution: int,
    base_height: float = 3000.0,
    cliff_position: float = 0.5,
    cliff_height: float = 200.0,
) -> NDArray[np.float64]:
    """Generate two plateaus joined by a single-row cliff band.

    Rows before int(resolution * cliff_position) sit at base_height, the
    cliff row drops half of cliff_height, later rows drop all of it. A small
    sinusoidal ripple along X keeps the plateaus from being perfectly flat.
    """
    cliff_z = int(resolution * cliff_position)
    zs, xs = _grid(resolution)

    heights = np.where(
        zs < cliff_z,
        base_height,
        np.where(zs == cliff_z, base_height - cliff_height * 0.5, base_height - cliff_height),
    )
    heights = heights + np.sin(xs * CLIFF_RIPPLE_FREQUENCY) * CLIFF_RIPPLE_AMPLITUDE
    return heights.reshape(-1)


def generate_mountain_heightmap(
    resolution: int,
    base_height: float = 2500.0,
    seed: int = 42,
    chunk_size: float = 64.0,
) -> NDArray[np.float64]:
    """Generate a peak with ridges, slope variation and seeded noise.

    Elevation falls off radially from the chunk centre. The falloff is
    perturbed by a three-lobed angular ridge term and a sinusoidal
    variation, then by uniform noise. The vertical scale is chosen so the
    mean gradient along the radial profile is about MOUNTAIN_TARGET_GRADIENT,
    which yields a mix of walkable, slideable and steeper zones. The centre
    sample is pinned to the peak.

    Args:
        resolution: Samples per side, at least 2.
        base_height: Elevation where the profile reaches zero.
        seed: Seed for noise and phase offsets.
        chunk_size: World size the heightmap will cover.

    Returns:
        Flat heightmap array.
    """
    if resolution < 2:
        raise ValueError(f"Mountain heightmap needs resolution >= 2, got {resolution}")

    rng = np.random.default_rng(seed)
    center = resolution // 2
    cell_size = chunk_size / resolution

    max_dist_cells = math.sqrt(2.0 * center * center)
    max_height_diff = MOUNTAIN_TARGET_GRADIENT * max_dist_cells * cell_size

    zs, xs = _grid(resolution)
    dist_normalized = np.sqrt((xs - center) ** 2 + (zs - center) ** 2) / max_dist_cells

    angle = np.arctan2(zs - center, xs - center)
    ridge = MOUNTAIN_RIDGE_STRENGTH * np.sin(angle * MOUNTAIN_RIDGE_LOBES + seed * 0.1)
    variation = np.sin(xs * 0.3 + seed) * np.cos(zs * 0.25) * MOUNTAIN_VARIATION

    falloff = 1.0 - dist_normalized
    falloff = np.maximum(0.0, falloff + variation + ridge * (1.0 - dist_normalized))

    noise = rng.uniform(
        -MOUNTAIN_NOISE_AMPLITUDE, MOUNTAIN_NOISE_AMPLITUDE, size=(resolution, resolution)
    )
    heights = base_height + max_height_diff * np.maximum(0.0, falloff + noise)

    heights[center, center] = base_height + max_height_diff
    return heights.reshape(-1)
