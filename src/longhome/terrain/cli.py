"""Command-line interface for generating and analyzing a terrain chunk."""

import argparse
import logging
import sys
import time
from pathlib import Path

import structlog

from ..exceptions import ConfigError

TERRAIN_KINDS = ("flat", "slope", "cliff", "mountain")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate and analyze a Long-Home terrain chunk"
    )
    parser.add_argument(
        "--terrain",
        choices=TERRAIN_KINDS,
        default="mountain",
        help="Synthetic heightmap to generate (default: mountain)",
    )
    parser.add_argument(
        "--resolution", type=int, default=32, help="Chunk grid resolution (default: 32)"
    )
    parser.add_argument(
        "--source-resolution",
        type=int,
        default=None,
        help="Generate at this resolution and resample into the chunk",
    )
    parser.add_argument(
        "--chunk-size",
        type=float,
        default=64.0,
        help="Chunk size in world units (default: 64)",
    )
    parser.add_argument(
        "--seed", type=int, default=42, help="Random seed for mountain (default: 42)"
    )
    parser.add_argument(
        "--base-height",
        type=float,
        default=3000.0,
        help="Base elevation (default: 3000)",
    )
    parser.add_argument(
        "--slope-degrees",
        type=float,
        default=30.0,
        help="Slope angle for slope terrain (default: 30)",
    )
    parser.add_argument(
        "--config", type=str, default=None, help="TOML analysis config (optional)"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for terrain analysis."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.resolution < 1:
        parser.error(f"--resolution must be positive, got {args.resolution}")
    if args.source_resolution is not None and args.source_resolution < 1:
        parser.error(
            f"--source-resolution must be positive, got {args.source_resolution}"
        )
    if args.chunk_size <= 0:
        parser.error(f"--chunk-size must be positive, got {args.chunk_size:g}")

    source_resolution = args.source_resolution or args.resolution
    if args.terrain == "mountain" and source_resolution < 2:
        parser.error("mountain terrain needs a resolution of at least 2")

    # Configure structlog for CLI
    level = logging.DEBUG if args.verbose else logging.INFO
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )

    # Import here to avoid slow startup for --help
    from .chunk import TerrainChunk
    from .config import DEFAULT_ANALYSIS_CONFIG, load_analysis_config
    from .heightmaps import (
        generate_cliff_heightmap,
        generate_flat_heightmap,
        generate_mountain_heightmap,
        generate_slope_heightmap,
    )
    from .validation import validate_chunk

    config = DEFAULT_ANALYSIS_CONFIG
    if args.config:
        try:
            config = load_analysis_config(Path(args.config))
        except (FileNotFoundError, ConfigError) as e:
            parser.error(str(e))

    if args.terrain == "flat":
        heightmap = generate_flat_heightmap(source_resolution, args.base_height)
    elif args.terrain == "slope":
        heightmap = generate_slope_heightmap(
            source_resolution,
            args.base_height,
            args.slope_degrees,
            chunk_size=args.chunk_size,
        )
    elif args.terrain == "cliff":
        heightmap = generate_cliff_heightmap(source_resolution, args.base_height)
    else:
        heightmap = generate_mountain_heightmap(
            source_resolution,
            args.base_height,
            seed=args.seed,
            chunk_size=args.chunk_size,
        )

    print(
        f"Analyzing {args.terrain} terrain: {args.resolution}x{args.resolution} cells "
        f"over {args.chunk_size:g} units"
    )

    chunk = TerrainChunk(
        chunk_coords=(0, 0),
        chunk_size=args.chunk_size,
        resolution=args.resolution,
        config=config,
    )

    start_time = time.time()
    chunk.load_heightmap(heightmap, source_resolution)
    chunk.analyze()
    elapsed = time.time() - start_time

    summary = chunk.summary()
    print()
    print(f"Analysis complete in {elapsed:.2f}s")
    print(f"  Total cells:     {summary.total_cells}")
    print(f"  Elevation range: {summary.elevation_range:.0f}")
    print(f"  Average slope:   {summary.average_slope:.1f} deg")
    print(f"  Cliff cells:     {summary.cliff_cells}")
    print(f"  Exit zones:      {summary.exit_zones}")
    print(f"  Rope required:   {summary.rope_required}")
    print("  Zones:")
    for zone, count in chunk.zone_counts().items():
        print(f"    {zone.value}: {count}")

    result = validate_chunk(chunk)
    for warning in result.warnings:
        print(f"  warning: {warning}")
    for error in result.errors:
        print(f"  error: {error}")

    return 0 if result.passed else 1


if __name__ == "__main__":
    sys.exit(main())
