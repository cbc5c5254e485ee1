"""
CLI commands

Each command turns its arguments into the same form fields a request would
carry, runs the matching handler and prints the JSON body.
"""

import argparse
import json
import sys
from pathlib import Path

from cellquery.core.api import (
    Response,
    handle_check_intersection,
    handle_cover,
    handle_cover_h3,
)


def run_command(args: argparse.Namespace) -> int:
    """Run a parsed command, returning the process exit status"""
    try:
        geojson = read_geojson(args.geojson)
    except OSError as e:
        print(f"Error: Cannot read GeoJSON: {e}", file=sys.stderr)
        return 1

    if args.command == "cover":
        response = handle_cover(
            {
                "geojson": geojson,
                "max_level_geojson": args.max_level,
                "min_level_geojson": args.min_level,
            }
        )
    elif args.command == "cover-h3":
        response = handle_cover_h3({"geojson": geojson, "h3_resolution": args.resolution})
    elif args.command == "intersects":
        response = handle_check_intersection(
            {
                "geojson": geojson,
                "lat": args.lat,
                "lng": args.lng,
                "radius": args.radius,
                "max_level_geojson": args.max_level,
                "min_level_geojson": args.min_level,
                "max_level_circle": args.max_level_circle,
            }
        )
    else:
        print(f"Error: Unknown command: {args.command}", file=sys.stderr)
        return 1

    return print_response(response)


def read_geojson(source: str) -> str:
    """Read GeoJSON text from a file path, or stdin for '-'"""
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def print_response(response: Response) -> int:
    if response.ok:
        print(json.dumps(response.body))
        return 0
    print(f"Error ({response.status}): {response.body['error']}", file=sys.stderr)
    return 1
