"""Slope and surface lookup tables for gameplay classification."""

from ..terrain_types import SurfaceType, TerrainZone
from .config import DEFAULT_ANALYSIS_CONFIG, DEFAULT_FRICTION, SlopeThresholds


def zone_from_slope(
    slope_angle: float,
    thresholds: SlopeThresholds = DEFAULT_ANALYSIS_CONFIG.thresholds,
) -> TerrainZone:
    """Classify a slope angle into a terrain zone.

    Thresholds are checked from most to least severe, so a slope sitting
    exactly on a boundary gets the more severe zone.

    Note: with the default thresholds slide_min == walkable_max, so STEEP
    is never returned. The branch is kept so that a config separating the
    two thresholds gets a STEEP band.

    Args:
        slope_angle: Slope in degrees.
        thresholds: Slope thresholds to classify against.

    Returns:
        The TerrainZone for this slope.
    """
    if slope_angle >= thresholds.cliff_min:
        return TerrainZone.CLIFF
    elif slope_angle >= thresholds.rappel_min:
        return TerrainZone.RAPPEL_REQUIRED
    elif slope_angle >= thresholds.downclimb_min:
        return TerrainZone.DOWNCLIMB
    elif slope_angle >= thresholds.slide_min:
        return TerrainZone.SLIDEABLE
    elif slope_angle >= thresholds.walkable_max:
        return TerrainZone.STEEP
    else:
        return TerrainZone.WALKABLE


def surface_friction(
    surface_type: SurfaceType,
    friction_table: dict[SurfaceType, float] = DEFAULT_ANALYSIS_CONFIG.friction,
) -> float:
    """Look up friction coefficient for a surface, defaulting to 0.5."""
    return friction_table.get(surface_type, DEFAULT_FRICTION)


def clamp01(value: float) -> float:
    """Clamp a value to [0, 1]."""
    return max(0.0, min(1.0, value))
