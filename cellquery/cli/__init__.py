"""
CellQuery CLI Entry Points

Provides command-line interface for:
- cover: Cover GeoJSON geometries with hierarchical cells
- cover-h3: Fill GeoJSON polygons with compacted hexagons
- intersects: Check GeoJSON geometries against a point and a circle
"""

import argparse
import logging
import sys

# Finest level used when --max-level is omitted; coverings have no cell budget
DEFAULT_MAX_LEVEL = "12"


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        prog="cellquery",
        description="CellQuery - Spatial coverings and intersection queries for GeoJSON",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  cellquery cover area.geojson --max-level 10 --min-level 5
  cellquery cover-h3 area.geojson --resolution 7
  cellquery intersects area.geojson --lat 0.5 --lng 0.5 --radius 1000
  cat area.geojson | cellquery cover - --max-level 12
        """,
    )

    parser.add_argument("--verbose", "-v", action="store_true", help="Verbose output")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Cover command
    cover_parser = subparsers.add_parser("cover", help="Cover geometries with hierarchical cells")
    cover_parser.add_argument("geojson", help="GeoJSON file path, or - for stdin")
    cover_parser.add_argument(
        "--max-level",
        default=DEFAULT_MAX_LEVEL,
        help=f"Finest cell level (default: {DEFAULT_MAX_LEVEL}); polygon coverings grow "
        "about 4x every two levels beyond it",
    )
    cover_parser.add_argument(
        "--min-level", default="0", help="Coarsest cell level (default: 0)"
    )

    # Hexagon command
    h3_parser = subparsers.add_parser("cover-h3", help="Fill polygons with compacted hexagons")
    h3_parser.add_argument("geojson", help="GeoJSON file path, or - for stdin")
    h3_parser.add_argument("--resolution", required=True, help="Hexagon resolution (0-15)")

    # Intersection command
    intersects_parser = subparsers.add_parser(
        "intersects", help="Check geometries against a point and a circle"
    )
    intersects_parser.add_argument("geojson", help="GeoJSON file path, or - for stdin")
    intersects_parser.add_argument("--lat", required=True, help="Point / circle center latitude")
    intersects_parser.add_argument("--lng", required=True, help="Point / circle center longitude")
    intersects_parser.add_argument("--radius", required=True, help="Circle radius in meters")
    intersects_parser.add_argument(
        "--max-level",
        default=DEFAULT_MAX_LEVEL,
        help=f"Finest cell level for geometries (default: {DEFAULT_MAX_LEVEL}); polygon "
        "coverings grow about 4x every two levels beyond it",
    )
    intersects_parser.add_argument(
        "--min-level", default="0", help="Coarsest cell level for geometries (default: 0)"
    )
    intersects_parser.add_argument(
        "--max-level-circle", default="30", help="Finest cell level for the circle (default: 30)"
    )

    args = parser.parse_args(argv)

    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level, format="%(message)s" if not args.verbose else "%(levelname)s: %(message)s"
    )

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    from cellquery.cli.commands import run_command

    sys.exit(run_command(args))


if __name__ == "__main__":
    main()
