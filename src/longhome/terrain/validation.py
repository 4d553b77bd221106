"""Post-analysis consistency checks for terrain chunks."""

import structlog

from .chunk import TerrainChunk

logger = structlog.get_logger()

# Tolerance for float comparisons between cell state and heightmap
_ELEVATION_TOLERANCE = 1e-9


class ValidationResult:
    """Result of chunk validation."""

    def __init__(self) -> None:
        self.errors: list[str] = []
        self.warnings: list[str] = []
        self.passed = True

    def add_error(self, message: str) -> None:
        """Add validation error."""
        self.errors.append(message)
        self.passed = False

    def add_warning(self, message: str) -> None:
        """Add validation warning."""
        self.warnings.append(message)


def validate_chunk(chunk: TerrainChunk) -> ValidationResult:
    """Validate an analyzed chunk against its structural and gameplay invariants.

    Args:
        chunk: The chunk to check.

    Returns:
        ValidationResult with any errors/warnings.
    """
    result = ValidationResult()

    if not chunk.is_analyzed:
        result.add_error("Chunk has not been analyzed")
        return result

    _check_heightmap_sync(chunk, result)
    _check_classification(chunk, result)
    _check_membership(chunk, result)

    if not chunk.exit_zone_mask.any():
        result.add_warning("Chunk has no exit zones")

    if result.passed:
        logger.debug("chunk_validation_passed", chunk=chunk.chunk_coords)
    else:
        logger.warning(
            "chunk_validation_failed",
            chunk=chunk.chunk_coords,
            errors=len(result.errors),
        )

    return result


def _check_heightmap_sync(chunk: TerrainChunk, result: ValidationResult) -> None:
    """Check that every cell's elevation and position match the heightmap."""
    expected_len = chunk.resolution * chunk.resolution
    if chunk.heightmap.size != expected_len:
        result.add_error(
            f"Heightmap has {chunk.heightmap.size} samples, expected {expected_len}"
        )
        return

    mismatched = 0
    for cell in chunk.iter_cells():
        height = chunk.get_height(cell.grid_coords)
        if (
            abs(cell.elevation - height) > _ELEVATION_TOLERANCE
            or abs(cell.position.y - height) > _ELEVATION_TOLERANCE
        ):
            mismatched += 1

    if mismatched > 0:
        result.add_error(f"{mismatched} cells out of sync with heightmap")


def _check_classification(chunk: TerrainChunk, result: ValidationResult) -> None:
    """Check that cell flags agree with their slope angles."""
    thresholds = chunk.config.thresholds

    for cell in chunk.iter_cells():
        where = f"cell {cell.grid_coords}"

        if cell.is_cliff and cell.slope_angle < thresholds.cliff_min:
            result.add_error(f"{where} marked cliff with slope {cell.slope_angle:.1f}")

        if cell.requires_rope and not (
            cell.is_cliff or cell.slope_angle >= thresholds.rappel_min
        ):
            result.add_error(
                f"{where} requires rope but slope is only {cell.slope_angle:.1f}"
            )

        if not 0.0 <= cell.exit_zone_quality <= 1.0:
            result.add_error(f"{where} exit quality {cell.exit_zone_quality} out of range")
        elif cell.exit_zone_quality > 0.0 and not cell.is_exit_zone:
            result.add_error(f"{where} has exit quality but is not an exit zone")

        if not 0.0 <= cell.slide_risk <= 1.0:
            result.add_error(f"{where} slide risk {cell.slide_risk} out of range")
        elif cell.slide_risk > 0.0 and not cell.is_slideable:
            result.add_error(f"{where} has slide risk but is not slideable")


def _check_membership(chunk: TerrainChunk, result: ValidationResult) -> None:
    """Check that membership masks agree with per-cell flags."""
    disagreements = 0
    for cell in chunk.iter_cells():
        x, z = cell.grid_coords.x, cell.grid_coords.z
        if (
            chunk.cliff_mask[z, x] != cell.is_cliff
            or chunk.exit_zone_mask[z, x] != cell.is_exit_zone
            or chunk.rope_required_mask[z, x] != cell.requires_rope
        ):
            disagreements += 1

    if disagreements > 0:
        result.add_error(f"{disagreements} cells disagree with membership sets")
