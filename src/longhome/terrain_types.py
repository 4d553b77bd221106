"""Surface types and terrain zones used by gameplay classification."""

from enum import Enum


class SurfaceType(str, Enum):
    """Ground surface material of a terrain cell."""

    SNOW_FIRM = "snow_firm"
    SNOW_SOFT = "snow_soft"
    SNOW_POWDER = "snow_powder"
    ICE = "ice"
    ROCK = "rock"
    ROCK_DRY = "rock_dry"
    ROCK_WET = "rock_wet"
    SCREE = "scree"
    MIXED = "mixed"

    @property
    def slideable(self) -> bool:
        """Whether a climber can glissade on this surface.

        Ice is excluded: it is handled as its own hazard, not as a slide.
        """
        return self in _SLIDEABLE_SURFACES


class TerrainZone(str, Enum):
    """Movement zone derived from slope angle."""

    WALKABLE = "walkable"
    STEEP = "steep"
    SLIDEABLE = "slideable"
    DOWNCLIMB = "downclimb"
    RAPPEL_REQUIRED = "rappel_required"
    CLIFF = "cliff"

    @property
    def walkable(self) -> bool:
        """Whether this zone can be crossed on foot."""
        return self in _WALKABLE_ZONES

    @property
    def requires_rope(self) -> bool:
        """Whether descending this zone needs a rope."""
        return self in _ROPE_ZONES


# Define sets for O(1) lookup
_SLIDEABLE_SURFACES = frozenset({
    SurfaceType.SNOW_FIRM,
    SurfaceType.SNOW_SOFT,
    SurfaceType.SNOW_POWDER,
    SurfaceType.SCREE,
})

_WALKABLE_ZONES = frozenset({
    TerrainZone.WALKABLE,
    TerrainZone.STEEP,
})

_ROPE_ZONES = frozenset({
    TerrainZone.RAPPEL_REQUIRED,
    TerrainZone.CLIFF,
})
