"""Terrain chunk: heightmap ownership, resampling, and slope analysis."""

from collections import Counter
from dataclasses import dataclass
from typing import Iterator, Sequence

import numpy as np
import structlog
from numpy.typing import NDArray
from scipy.ndimage import map_coordinates

from ..exceptions import HeightmapSizeError
from ..terrain_types import TerrainZone
from ..types import ZERO_VECTOR, GridCoord, Vector3
from .cell import TerrainCell
from .config import DEFAULT_ANALYSIS_CONFIG, TerrainAnalysisConfig

logger = structlog.get_logger()

DEFAULT_CHUNK_SIZE = 64.0
DEFAULT_RESOLUTION = 32


@dataclass(frozen=True)
class ChunkSummary:
    """Aggregate statistics of an analyzed chunk."""

    total_cells: int
    cliff_cells: int
    exit_zones: int
    rope_required: int
    elevation_range: float
    average_slope: float


@dataclass(frozen=True)
class _SlopeFields:
    """Pass 1 output arrays, each shaped (resolution, resolution) as [z, x]."""

    dx: NDArray[np.float64]
    dz: NDArray[np.float64]
    gradient: NDArray[np.float64]
    slope_angle: NDArray[np.float64]
    aspect: NDArray[np.float64]
    normal: NDArray[np.float64]  # [z, x, 3]
    curvature: NDArray[np.float64]
    drainage: NDArray[np.float64]


class TerrainChunk:
    """A square patch of terrain sampled on a resolution x resolution grid.

    Owns the flat heightmap (indexed z * resolution + x) and one TerrainCell
    per grid point. Call load_heightmap() then analyze() before trusting any
    derived cell state.
    """

    def __init__(
        self,
        chunk_coords: tuple[int, int] = (0, 0),
        chunk_size: float = DEFAULT_CHUNK_SIZE,
        resolution: int = DEFAULT_RESOLUTION,
        config: TerrainAnalysisConfig = DEFAULT_ANALYSIS_CONFIG,
    ):
        if resolution < 1:
            raise ValueError(f"Chunk resolution must be positive, got {resolution}")
        if chunk_size <= 0:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")

        self.chunk_coords = chunk_coords
        self.chunk_size = float(chunk_size)
        self.resolution = resolution
        self.cell_size = self.chunk_size / resolution
        self.config = config

        self.world_origin = Vector3(
            x=chunk_coords[0] * self.chunk_size,
            y=0.0,
            z=chunk_coords[1] * self.chunk_size,
        )

        self.min_elevation = 0.0
        self.max_elevation = 0.0
        self.average_slope = 0.0
        self.is_analyzed = False

        shape = (resolution, resolution)
        self.cliff_mask = np.zeros(shape, dtype=bool)
        self.exit_zone_mask = np.zeros(shape, dtype=bool)
        self.rope_required_mask = np.zeros(shape, dtype=bool)

        self._heightmap = np.zeros(resolution * resolution, dtype=np.float64)
        self._cells: list[list[TerrainCell]] = [
            [
                TerrainCell(
                    grid_coords=GridCoord(x=x, z=z),
                    position=self.grid_to_world(GridCoord(x=x, z=z)),
                )
                for z in range(resolution)
            ]
            for x in range(resolution)
        ]

    # -- Grid access ---------------------------------------------------------

    def grid_to_world(self, coord: GridCoord) -> Vector3:
        """World position of a cell centre, at elevation 0."""
        return Vector3(
            x=self.world_origin.x + coord.x * self.cell_size + self.cell_size * 0.5,
            y=0.0,
            z=self.world_origin.z + coord.z * self.cell_size + self.cell_size * 0.5,
        )

    def in_bounds(self, coord: GridCoord) -> bool:
        """Check if a grid coordinate lies inside this chunk."""
        return 0 <= coord.x < self.resolution and 0 <= coord.z < self.resolution

    def get_cell(self, coord: GridCoord) -> TerrainCell | None:
        """Get the cell at coord, or None if out of range."""
        if not self.in_bounds(coord):
            return None
        return self._cells[coord.x][coord.z]

    def get_height(self, coord: GridCoord) -> float:
        """Get heightmap sample at coord, or 0.0 if out of range."""
        if not self.in_bounds(coord):
            return 0.0
        return float(self._heightmap[coord.z * self.resolution + coord.x])

    def set_height(self, coord: GridCoord, height: float) -> None:
        """Set a single heightmap sample. Out-of-range coords are ignored.

        Elevation bounds are not recomputed; reload or re-analyze for that.
        """
        if not self.in_bounds(coord):
            return
        self._heightmap[coord.z * self.resolution + coord.x] = height
        self._cells[coord.x][coord.z].set_elevation(float(height))

    def iter_cells(self) -> Iterator[TerrainCell]:
        """Yield every cell in x-major order."""
        for column in self._cells:
            yield from column

    @property
    def heightmap(self) -> NDArray[np.float64]:
        """Read-only view of the flat heightmap buffer."""
        view = self._heightmap.view()
        view.flags.writeable = False
        return view

    # -- Heightmap loading ---------------------------------------------------

    def load_heightmap(
        self, data: Sequence[float] | NDArray[np.floating], data_resolution: int
    ) -> None:
        """Load a flat heightmap, resampling if its resolution differs.

        Args:
            data: Flat elevation samples indexed z * data_resolution + x. Must
                be one-dimensional; 2-D grids are rejected rather than flattened.
            data_resolution: Samples per side of data.

        Raises:
            HeightmapSizeError: If data is not 1-D or len(data) != data_resolution ** 2.
        """
        samples = np.asarray(data, dtype=np.float64)
        length = len(samples) if samples.ndim > 0 else 0
        if (
            samples.ndim != 1
            or data_resolution < 1
            or length != data_resolution * data_resolution
        ):
            raise HeightmapSizeError(length, data_resolution)

        if data_resolution == self.resolution:
            self._heightmap = samples.copy()
            logger.debug("heightmap_loaded", resolution=self.resolution)
        else:
            self._heightmap = self._resample(samples, data_resolution)
            logger.debug(
                "heightmap_resampled",
                source_resolution=data_resolution,
                resolution=self.resolution,
            )

        for cell in self.iter_cells():
            coord = cell.grid_coords
            cell.set_elevation(float(self._heightmap[coord.z * self.resolution + coord.x]))

        self._update_elevation_bounds()
        self.is_analyzed = False

    def _resample(
        self, samples: NDArray[np.float64], data_resolution: int
    ) -> NDArray[np.float64]:
        """Bilinearly resample a flat heightmap to this chunk's resolution.

        Destination cell i maps to source coordinate i / resolution *
        data_resolution; samples past the last row or column clamp to it.
        """
        source = samples.reshape(data_resolution, data_resolution)
        scale = data_resolution / self.resolution
        steps = np.arange(self.resolution, dtype=np.float64) * scale
        src_z, src_x = np.meshgrid(steps, steps, indexing="ij")

        # coordinates are in (row, col) order for map_coordinates
        coords = np.array([src_z, src_x])
        resampled = map_coordinates(source, coords, order=1, mode="nearest")
        return resampled.reshape(-1).astype(np.float64)

    def _update_elevation_bounds(self) -> None:
        self.min_elevation = float(self._heightmap.min())
        self.max_elevation = float(self._heightmap.max())

    # -- Analysis ------------------------------------------------------------

    def analyze(self) -> None:
        """Derive slope, curvature, cliff distance and classification for every cell.

        Runs three passes: per-cell gradient and curvature, a global
        nearest-cliff scan, then per-cell classification. Fully overwrites
        any previous analysis.
        """
        self.is_analyzed = False
        res = self.resolution

        fields = self._compute_slope_fields()
        self._apply_slope_fields(fields)
        self.average_slope = float(np.sum(fields.slope_angle)) / (res * res)

        self.cliff_mask[:] = False
        self.exit_zone_mask[:] = False
        self.rope_required_mask[:] = False

        self._calculate_cliff_distances()

        for cell in self.iter_cells():
            cell.calculate_derived_properties(self.config)
            x, z = cell.grid_coords.x, cell.grid_coords.z
            self.cliff_mask[z, x] = cell.is_cliff
            self.exit_zone_mask[z, x] = cell.is_exit_zone
            self.rope_required_mask[z, x] = cell.requires_rope

        self.is_analyzed = True
        logger.info(
            "chunk_analyzed",
            chunk=self.chunk_coords,
            resolution=res,
            average_slope=round(self.average_slope, 2),
            cliff_cells=int(self.cliff_mask.sum()),
            exit_zones=int(self.exit_zone_mask.sum()),
            rope_required=int(self.rope_required_mask.sum()),
        )

    def _compute_slope_fields(self) -> _SlopeFields:
        """Central-difference gradient and Laplacian over the edge-clamped grid."""
        geometry = self.config.geometry
        res = self.resolution
        cs = self.cell_size

        heights = self._heightmap.reshape(res, res)
        padded = np.pad(heights, 1, mode="edge")
        north = padded[:-2, 1:-1]
        south = padded[2:, 1:-1]
        west = padded[1:-1, :-2]
        east = padded[1:-1, 2:]

        dx = (east - west) / (2.0 * cs)
        dz = (south - north) / (2.0 * cs)
        gradient = np.sqrt(dx * dx + dz * dz)
        slope_angle = np.degrees(np.arctan(gradient))

        normal = np.stack([-dx, np.ones_like(dx), -dz], axis=-1)
        normal /= np.linalg.norm(normal, axis=-1, keepdims=True)

        aspect = np.degrees(np.arctan2(dx, -dz))
        aspect = np.where(aspect < 0.0, aspect + 360.0, aspect)

        d2x = (east + west - 2.0 * heights) / (cs * cs)
        d2z = (north + south - 2.0 * heights) / (cs * cs)
        curvature = (d2x + d2z) * 0.5
        drainage = np.clip(-curvature * geometry.drainage_scale, 0.0, 1.0)

        return _SlopeFields(
            dx=dx,
            dz=dz,
            gradient=gradient,
            slope_angle=slope_angle,
            aspect=aspect,
            normal=normal,
            curvature=curvature,
            drainage=drainage,
        )

    def _apply_slope_fields(self, fields: _SlopeFields) -> None:
        epsilon = self.config.geometry.gradient_epsilon

        for cell in self.iter_cells():
            x, z = cell.grid_coords.x, cell.grid_coords.z
            nx, ny, nz = fields.normal[z, x]

            cell.slope_angle = float(fields.slope_angle[z, x])
            cell.normal = Vector3(x=float(nx), y=float(ny), z=float(nz))
            cell.curvature = float(fields.curvature[z, x])
            cell.drainage = float(fields.drainage[z, x])

            if fields.gradient[z, x] > epsilon:
                cell.slope_direction = Vector3(
                    x=float(fields.dx[z, x]), y=0.0, z=float(fields.dz[z, x])
                ).normalized()
                cell.aspect = float(fields.aspect[z, x])
            else:
                # Flat: aspect keeps its previous value
                cell.slope_direction = ZERO_VECTOR

    def _calculate_cliff_distances(self) -> None:
        """Find distance and direction from each cell to the nearest cliff cell.

        Brute force over all cliff cells, vectorized in blocks of cells.
        Ties resolve to the first cliff in x-major order. Distances are
        computed in vectorized float64, so they can differ from a scalar
        sqrt loop in the last bits; two cliffs equidistant to within about
        1e-13 may then pick a different nearest cliff and direction. The
        distance itself is unaffected. A k-d tree would scale better for
        large resolutions but must keep the tie rule.
        """
        geometry = self.config.geometry
        cliff_min = self.config.thresholds.cliff_min
        cells = list(self.iter_cells())

        positions = np.array(
            [(c.position.x, c.position.y, c.position.z) for c in cells],
            dtype=np.float64,
        )
        is_cliff_point = np.array([c.slope_angle >= cliff_min for c in cells], dtype=bool)
        cliff_points = positions[is_cliff_point]

        distances = np.full(len(cells), geometry.no_cliff_distance, dtype=np.float64)
        directions = np.zeros((len(cells), 3), dtype=np.float64)

        if len(cliff_points) > 0:
            block = geometry.cliff_search_block
            for start in range(0, len(cells), block):
                origins = positions[start:start + block]
                offsets = cliff_points[np.newaxis, :, :] - origins[:, np.newaxis, :]
                dist = np.sqrt(np.sum(offsets * offsets, axis=2))

                rows = np.arange(len(origins))
                nearest = np.argmin(dist, axis=1)
                nearest_dist = dist[rows, nearest]

                closer = nearest_dist < geometry.no_cliff_distance
                distances[start:start + block] = np.where(
                    closer, nearest_dist, geometry.no_cliff_distance
                )

                has_direction = closer & (nearest_dist > geometry.cliff_direction_epsilon)
                nearest_offsets = offsets[rows, nearest]
                safe_dist = np.where(has_direction, nearest_dist, 1.0)
                directions[start:start + block] = np.where(
                    has_direction[:, np.newaxis],
                    nearest_offsets / safe_dist[:, np.newaxis],
                    0.0,
                )

        for i, cell in enumerate(cells):
            cell.distance_to_cliff = float(distances[i])
            dx, dy, dz = directions[i]
            if dx == 0.0 and dy == 0.0 and dz == 0.0:
                cell.cliff_direction = ZERO_VECTOR
            else:
                cell.cliff_direction = Vector3(x=float(dx), y=float(dy), z=float(dz))

    # -- Aggregates ----------------------------------------------------------

    @property
    def elevation_range(self) -> float:
        return self.max_elevation - self.min_elevation

    @property
    def cliff_cells(self) -> frozenset[GridCoord]:
        """Grid coordinates of cliff cells (valid after analyze())."""
        return _mask_to_coords(self.cliff_mask)

    @property
    def exit_zone_cells(self) -> frozenset[GridCoord]:
        """Grid coordinates of exit-zone cells (valid after analyze())."""
        return _mask_to_coords(self.exit_zone_mask)

    @property
    def rope_required_cells(self) -> frozenset[GridCoord]:
        """Grid coordinates of rope-required cells (valid after analyze())."""
        return _mask_to_coords(self.rope_required_mask)

    def zone_counts(self) -> dict[TerrainZone, int]:
        """Count cells per terrain zone. Zones with no cells are included as 0."""
        counts = Counter(cell.terrain_zone for cell in self.iter_cells())
        return {zone: counts.get(zone, 0) for zone in TerrainZone}

    def summary(self) -> ChunkSummary:
        return ChunkSummary(
            total_cells=self.resolution * self.resolution,
            cliff_cells=int(self.cliff_mask.sum()),
            exit_zones=int(self.exit_zone_mask.sum()),
            rope_required=int(self.rope_required_mask.sum()),
            elevation_range=self.elevation_range,
            average_slope=self.average_slope,
        )


def _mask_to_coords(mask: NDArray[np.bool_]) -> frozenset[GridCoord]:
    zs, xs = np.nonzero(mask)
    return frozenset(GridCoord(x=int(x), z=int(z)) for z, x in zip(zs, xs))
