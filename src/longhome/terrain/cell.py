"""Per-cell terrain state and gameplay classification."""

from dataclasses import dataclass, field

from ..terrain_types import SurfaceType, TerrainZone
from ..types import UP_VECTOR, ZERO_VECTOR, GridCoord, Vector3
from .classification import clamp01, surface_friction, zone_from_slope
from .config import DEFAULT_ANALYSIS_CONFIG, TerrainAnalysisConfig


@dataclass
class TerrainCell:
    """Full analysis state of one lattice point.

    Geometry fields are written by TerrainChunk.analyze(). Classification
    fields (terrain_zone through slide_risk) are only ever written by
    calculate_derived_properties().
    """

    grid_coords: GridCoord = field(default_factory=lambda: GridCoord(x=0, z=0))
    position: Vector3 = ZERO_VECTOR

    # Inputs
    elevation: float = 0.0
    surface_type: SurfaceType = SurfaceType.SNOW_FIRM
    ice_probability: float = 0.0
    sun_exposure: float = 0.5

    # Geometry
    slope_angle: float = 0.0
    slope_direction: Vector3 = ZERO_VECTOR
    aspect: float = 0.0  # compass bearing of downhill, 0 = north
    normal: Vector3 = UP_VECTOR
    curvature: float = 0.0
    drainage: float = 0.0
    distance_to_cliff: float = 1000.0
    cliff_direction: Vector3 = ZERO_VECTOR

    # Classification
    terrain_zone: TerrainZone = TerrainZone.WALKABLE
    friction: float = 0.5
    is_cliff: bool = False
    is_walkable: bool = True
    requires_rope: bool = False
    is_slideable: bool = False
    is_exit_zone: bool = False
    exit_zone_quality: float = 0.0
    slide_risk: float = 0.0

    def set_elevation(self, height: float) -> None:
        """Set elevation and keep position.y in sync."""
        self.elevation = height
        self.position = self.position.model_copy(update={"y": height})

    def calculate_derived_properties(
        self, config: TerrainAnalysisConfig = DEFAULT_ANALYSIS_CONFIG
    ) -> None:
        """Recompute all classification fields from current geometry."""
        thresholds = config.thresholds
        hazard = config.hazard

        self.terrain_zone = zone_from_slope(self.slope_angle, thresholds)
        self.friction = surface_friction(self.surface_type, config.friction)

        self.is_cliff = self.slope_angle >= thresholds.cliff_min
        self.is_walkable = self.terrain_zone.walkable
        self.requires_rope = self.terrain_zone.requires_rope
        self.is_slideable = (
            thresholds.slide_min <= self.slope_angle <= thresholds.slide_max
            and self.surface_type.slideable
        )

        self.is_exit_zone = (
            self.slope_angle < thresholds.slide_min
            and self.curvature < hazard.exit_curvature_max
            and not self.is_cliff
            and self.distance_to_cliff > hazard.exit_min_cliff_distance
        )

        if self.is_exit_zone:
            flatness = clamp01(1.0 - self.slope_angle / thresholds.slide_min)
            clearance = min(1.0, self.distance_to_cliff / hazard.exit_quality_falloff)
            self.exit_zone_quality = flatness * clearance
        else:
            self.exit_zone_quality = 0.0

        if self.is_slideable:
            risk = (
                (self.slope_angle - thresholds.slide_min)
                / hazard.slide_angle_span
                * hazard.slide_angle_weight
            )
            if self.distance_to_cliff < hazard.cliff_proximity_range:
                proximity = 1.0 - self.distance_to_cliff / hazard.cliff_proximity_range
                risk += proximity * hazard.cliff_proximity_weight
            risk += self.ice_probability * hazard.ice_weight
            self.slide_risk = clamp01(risk)
        else:
            self.slide_risk = 0.0
