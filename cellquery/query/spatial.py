"""
Spatial query orchestration over GeoJSON payloads

Supports:
- Hierarchical cell coverings of points and polygons
- Compacted hexagonal coverings of polygons
- Point and circle intersection checks

Only Point and Polygon geometries are covered. Every polygon ring is
covered on its own. Other geometry types are skipped with a log line so
that mixed collections still produce a result.
"""

import logging
from typing import Any

from cellquery.config import DEFAULT_CONFIG, CoverageConfig
from cellquery.core.geometry import Point, Polygon
from cellquery.grid.cell_id import CellId, check_level
from cellquery.grid.hex_grid import (
    MAX_RESOLUTION,
    compact_hex,
    hex_to_polygon_coordinates,
    polyfill_hex,
)
from cellquery.io.geojson import Feature, decode_geojson
from cellquery.query.covering import (
    check_level_range,
    cover_cap,
    cover_point,
    cover_polygon,
    vertices_of,
)

logger = logging.getLogger(__name__)


def cover_geojson(payload: str | bytes, max_level: int, min_level: int) -> dict[str, Any]:
    """
    Cover every point and polygon of a GeoJSON payload

    Args:
        payload: GeoJSON document
        max_level: Finest cell level
        min_level: Coarsest cell level (polygons only)

    Returns:
        {"max_level_geojson", "cell_tokens", "cells"} where cells holds the
        four [lat, lng] corners of each covering cell

    Examples:
        >>> square = '{"type": "Polygon", "coordinates": [[[0,0],[1,0],[1,1],[0,1],[0,0]]]}'
        >>> result = cover_geojson(square, max_level=10, min_level=5)
        >>> tokens = result["cell_tokens"].split(",")
    """
    check_level_range(max_level, min_level)
    features = decode_geojson(payload)

    tokens: list[str] = []
    cells: list[list[list[float]]] = []

    for feature in features:
        if feature.is_polygon():
            for ring in feature.polygon:
                _, ring_tokens, vertex_sets = cover_polygon(
                    Polygon.from_lnglat(ring), max_level, min_level
                )
                tokens.extend(ring_tokens)
                cells.extend(_to_latlng(vertices) for vertices in vertex_sets)
        elif feature.is_point():
            _, token, vertices = cover_point(Point.from_lnglat(feature.point), max_level)
            tokens.append(token)
            cells.append(_to_latlng(vertices))
        else:
            _log_skipped(feature)

    return {
        "max_level_geojson": max_level,
        "cell_tokens": ",".join(tokens),
        "cells": cells,
    }


def cover_geojson_h3(payload: str | bytes, resolution: int) -> dict[str, Any]:
    """
    Fill every polygon of a GeoJSON payload with compacted hexagons

    Returns:
        {"hexagons_geojson": FeatureCollection} with one Polygon feature per
        compacted cell
    """
    check_level(resolution, MAX_RESOLUTION)
    features = decode_geojson(payload)

    hexagons: list[dict[str, Any]] = []
    for feature in features:
        if not feature.is_polygon():
            _log_skipped(feature)
            continue
        for ring in feature.polygon:
            filled = polyfill_hex(Polygon.from_lnglat(ring), resolution)
            compacted = compact_hex(filled)
            logger.debug("Compacted %d hexagons into %d", len(filled), len(compacted))
            hexagons.extend(_hexagon_feature(cell) for cell in sorted(compacted))

    return {
        "hexagons_geojson": {"type": "FeatureCollection", "features": hexagons},
    }


def check_intersection(
    payload: str | bytes,
    lat: float,
    lng: float,
    radius: float,
    max_level: int,
    min_level: int,
    max_level_circle: int,
    config: CoverageConfig = DEFAULT_CONFIG,
) -> dict[str, Any]:
    """
    Check whether the payload's geometries touch a point and a circle

    The point is represented by its cell at ``max_level``; the circle of
    ``radius`` meters by a covering of at most ``config.max_cap_cells``
    cells no finer than ``max_level_circle``.

    Returns:
        {"intersects_with_point", "intersects_with_circle", "radius", "cells"}
        where cells are the circle covering's corners as [lat, lng]
    """
    check_level_range(max_level, min_level)
    check_level(max_level_circle)
    features = decode_geojson(payload)

    center = Point(lat=lat, lng=lng)
    circle = cover_cap(center, radius, max_level_circle, config.max_cap_cells, config)
    target = CellId.from_point(center, max_level)

    intersects_point = intersects_circle = False
    for feature in features:
        if feature.is_polygon():
            for ring in feature.polygon:
                covering, _, _ = cover_polygon(Polygon.from_lnglat(ring), max_level, min_level)
                intersects_point = intersects_point or covering.intersects_cell(target)
                intersects_circle = intersects_circle or covering.intersects(circle)
        elif feature.is_point():
            covering, _, _ = cover_point(Point.from_lnglat(feature.point), max_level)
            [cell] = covering
            intersects_point = intersects_point or target.intersects(cell)
            intersects_circle = intersects_circle or circle.intersects_cell(cell)
        else:
            _log_skipped(feature)

    return {
        "intersects_with_point": intersects_point,
        "intersects_with_circle": intersects_circle,
        "radius": radius,
        "cells": [_to_latlng(vertices) for vertices in vertices_of(circle)],
    }


def _to_latlng(vertices: list[Point]) -> list[list[float]]:
    return [p.to_latlng() for p in vertices]


def _hexagon_feature(cell: str) -> dict[str, Any]:
    ring = [p.to_lnglat() for p in hex_to_polygon_coordinates(cell)]
    ring.append(list(ring[0]))
    return {
        "type": "Feature",
        "geometry": {"type": "Polygon", "coordinates": [ring]},
        "properties": {},
    }


def _log_skipped(feature: Feature) -> None:
    logger.info("Skipping unsupported geometry type: %s", feature.geometry_type)
