"""Tests for per-cell derived property computation."""

import pytest

from longhome.terrain.cell import TerrainCell
from longhome.terrain.config import SlopeThresholds, TerrainAnalysisConfig
from longhome.terrain_types import SurfaceType, TerrainZone
from longhome.types import GridCoord, Vector3


def make_cell(**fields) -> TerrainCell:
    """Create a cell with the given fields and classify it."""
    cell = TerrainCell()
    for name, value in fields.items():
        setattr(cell, name, value)
    cell.calculate_derived_properties()
    return cell


class TestDefaults:
    """Tests for freshly created cells."""

    def test_default_state(self) -> None:
        """Fresh cells are flat, walkable and far from any cliff."""
        cell = TerrainCell()
        assert cell.grid_coords == GridCoord(x=0, z=0)
        assert cell.normal == Vector3(y=1.0)
        assert cell.distance_to_cliff == 1000.0
        assert cell.surface_type == SurfaceType.SNOW_FIRM
        assert cell.terrain_zone == TerrainZone.WALKABLE
        assert cell.is_walkable
        assert not cell.is_cliff
        assert cell.friction == 0.5
        assert cell.sun_exposure == 0.5

    def test_set_elevation_syncs_position(self) -> None:
        """set_elevation updates elevation and position.y together."""
        cell = TerrainCell(position=Vector3(x=2.0, y=0.0, z=6.0))
        cell.set_elevation(1234.5)
        assert cell.elevation == 1234.5
        assert cell.position == Vector3(x=2.0, y=1234.5, z=6.0)


class TestSlideableSnow:
    """Tests for slideable snow slopes."""

    def test_firm_snow_32_degrees(self) -> None:
        """Firm snow at 32 degrees is slideable with angle-only risk."""
        cell = make_cell(
            slope_angle=32.0,
            surface_type=SurfaceType.SNOW_FIRM,
            distance_to_cliff=100.0,
            curvature=0.0,
        )
        assert cell.terrain_zone == TerrainZone.SLIDEABLE
        assert cell.is_slideable
        assert not cell.requires_rope
        assert not cell.is_walkable
        assert cell.friction == 0.3
        # (32 - 25) / 15 * 0.3, no cliff or ice contribution
        assert cell.slide_risk == pytest.approx(0.14)

    def test_cliff_proximity_raises_risk(self) -> None:
        """A nearby cliff adds to slide risk."""
        cell = make_cell(
            slope_angle=32.0,
            surface_type=SurfaceType.SNOW_FIRM,
            distance_to_cliff=25.0,
            ice_probability=0.0,
        )
        # 0.14 + (1 - 25/50) * 0.5
        assert cell.slide_risk == pytest.approx(0.39)
        assert cell.slide_risk >= 0.2

    def test_ice_probability_raises_risk(self) -> None:
        """Ice probability adds to slide risk."""
        cell = make_cell(
            slope_angle=25.0,
            surface_type=SurfaceType.SCREE,
            distance_to_cliff=500.0,
            ice_probability=0.5,
        )
        assert cell.slide_risk == pytest.approx(0.1)

    def test_slide_risk_clamped(self) -> None:
        """Slide risk saturates at 1.0."""
        cell = make_cell(
            slope_angle=40.0,
            surface_type=SurfaceType.SNOW_POWDER,
            distance_to_cliff=0.0,
            ice_probability=1.0,
        )
        assert cell.is_slideable
        assert cell.slide_risk == pytest.approx(1.0)
        assert cell.slide_risk <= 1.0

    def test_slide_range_inclusive(self) -> None:
        """Slide range includes both bounds."""
        assert make_cell(slope_angle=25.0).is_slideable
        assert make_cell(slope_angle=40.0).is_slideable
        assert not make_cell(slope_angle=24.9).is_slideable
        assert not make_cell(slope_angle=40.1).is_slideable


class TestIce:
    """Ice is never slideable regardless of slope."""

    def test_ice_not_slideable(self) -> None:
        """Icy slope in slide range is not slideable."""
        cell = make_cell(
            slope_angle=35.0,
            surface_type=SurfaceType.ICE,
            distance_to_cliff=30.0,
            ice_probability=0.8,
        )
        assert not cell.is_slideable
        assert cell.slide_risk == 0.0
        assert cell.friction <= 0.2

    @pytest.mark.parametrize("slope", [0.0, 25.0, 30.0, 40.0, 60.0, 80.0])
    def test_ice_never_slideable(self, slope: float) -> None:
        """Ice is not slideable at any slope."""
        assert not make_cell(slope_angle=slope, surface_type=SurfaceType.ICE).is_slideable

    def test_rock_not_slideable(self) -> None:
        """Dry rock is grippy and not slideable."""
        cell = make_cell(slope_angle=30.0, surface_type=SurfaceType.ROCK_DRY)
        assert not cell.is_slideable
        assert cell.friction >= 0.5


class TestExitZone:
    """Tests for exit zone detection and quality."""

    def test_flat_far_from_cliff(self) -> None:
        """Flat ground far from cliffs is a perfect exit zone."""
        cell = make_cell(slope_angle=0.0, curvature=0.0, distance_to_cliff=1000.0)
        assert cell.is_exit_zone
        assert cell.exit_zone_quality == pytest.approx(1.0)

    def test_quality_scales_with_slope_and_distance(self) -> None:
        """Quality is flatness times cliff clearance."""
        cell = make_cell(slope_angle=10.0, curvature=0.0, distance_to_cliff=25.0)
        assert cell.is_exit_zone
        # (1 - 10/25) * (25/50)
        assert cell.exit_zone_quality == pytest.approx(0.3)

    def test_too_close_to_cliff(self) -> None:
        """Cells within 10 units of a cliff are not exit zones."""
        cell = make_cell(slope_angle=5.0, distance_to_cliff=10.0)
        assert not cell.is_exit_zone
        assert cell.exit_zone_quality == 0.0

    def test_convex_curvature_excluded(self) -> None:
        """Convex ground is not an exit zone."""
        cell = make_cell(slope_angle=5.0, curvature=0.2, distance_to_cliff=100.0)
        assert not cell.is_exit_zone

    def test_too_steep(self) -> None:
        """Slopes at slide_min are not exit zones."""
        cell = make_cell(slope_angle=25.0, distance_to_cliff=100.0)
        assert not cell.is_exit_zone

    def test_quality_reset_when_no_longer_exit(self) -> None:
        """Exit quality drops to zero when the cell stops qualifying."""
        cell = make_cell(slope_angle=0.0, distance_to_cliff=1000.0)
        assert cell.exit_zone_quality > 0.0

        cell.slope_angle = 30.0
        cell.calculate_derived_properties()
        assert not cell.is_exit_zone
        assert cell.exit_zone_quality == 0.0

    def test_slide_risk_reset_when_no_longer_slideable(self) -> None:
        """Slide risk drops to zero when the cell stops being slideable."""
        cell = make_cell(slope_angle=30.0, distance_to_cliff=5.0)
        assert cell.slide_risk > 0.0

        cell.surface_type = SurfaceType.ICE
        cell.calculate_derived_properties()
        assert cell.slide_risk == 0.0


class TestSteepTerrain:
    """Tests for rope and cliff classification."""

    def test_cliff(self) -> None:
        """Slopes of 70 degrees and up are cliffs needing rope."""
        cell = make_cell(slope_angle=75.0)
        assert cell.terrain_zone == TerrainZone.CLIFF
        assert cell.is_cliff
        assert cell.requires_rope
        assert not cell.is_walkable
        assert not cell.is_exit_zone

    def test_rappel(self) -> None:
        """Slopes from 50 degrees need a rappel but are not cliffs."""
        cell = make_cell(slope_angle=55.0)
        assert cell.terrain_zone == TerrainZone.RAPPEL_REQUIRED
        assert not cell.is_cliff
        assert cell.requires_rope

    def test_downclimb(self) -> None:
        """Slopes from 35 degrees are downclimbs without rope."""
        cell = make_cell(slope_angle=45.0)
        assert cell.terrain_zone == TerrainZone.DOWNCLIMB
        assert not cell.requires_rope
        assert not cell.is_walkable


class TestInjectedConfig:
    """Cells classify against the config they are given."""

    def test_lower_cliff_threshold(self) -> None:
        """A lower cliff threshold reclassifies a 65 degree slope."""
        config = TerrainAnalysisConfig(thresholds=SlopeThresholds(cliff_min=60.0))
        cell = TerrainCell(slope_angle=65.0)

        cell.calculate_derived_properties()
        assert not cell.is_cliff

        cell.calculate_derived_properties(config)
        assert cell.is_cliff
        assert cell.terrain_zone == TerrainZone.CLIFF

    def test_steep_zone_is_walkable(self) -> None:
        """Separated thresholds expose a walkable STEEP band."""
        config = TerrainAnalysisConfig(
            thresholds=SlopeThresholds(walkable_max=20.0, slide_min=25.0)
        )
        cell = TerrainCell(slope_angle=22.0)
        cell.calculate_derived_properties(config)
        assert cell.terrain_zone == TerrainZone.STEEP
        assert cell.is_walkable

    def test_partial_friction_table(self) -> None:
        """Surfaces missing from the table use the default friction."""
        config = TerrainAnalysisConfig(friction={SurfaceType.ICE: 0.05})
        cell = TerrainCell(surface_type=SurfaceType.ROCK)
        cell.calculate_derived_properties(config)
        assert cell.friction == 0.5
