"""
CellQuery Request Handlers

Form-level entry points: each handler takes the string fields of a
form-encoded request, validates and converts them, runs the query and
returns a Response with a status code and a JSON-ready body.

Client mistakes (bad GeoJSON, bad numbers, bad levels) map to 400 with an
``{"error": ...}`` body; nothing is retried.
"""

import logging
import math
import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping

from cellquery.config import DEFAULT_CONFIG, CoverageConfig
from cellquery.core.exceptions import (
    CellQueryError,
    DecodeError,
    ParameterError,
    ValidationError,
)
from cellquery.query.spatial import check_intersection, cover_geojson, cover_geojson_h3

logger = logging.getLogger(__name__)

_INT_RE = re.compile(r"[+-]?\d+")

CLIENT_ERRORS = (DecodeError, ParameterError, ValidationError)


@dataclass
class Response:
    """Status code and JSON-ready body"""

    status: int
    body: dict[str, Any]

    @property
    def ok(self) -> bool:
        return self.status < 400


def parse_int(form: Mapping[str, str], name: str) -> int:
    """Required integer field"""
    raw = _require(form, name)
    if not _INT_RE.fullmatch(raw):
        raise ParameterError(f"Field {name!r} must be an integer, got {raw!r}")
    return int(raw)


def parse_float(form: Mapping[str, str], name: str) -> float:
    """Required finite float field"""
    raw = _require(form, name)
    try:
        value = float(raw)
    except ValueError:
        raise ParameterError(f"Field {name!r} must be a number, got {raw!r}") from None
    if not math.isfinite(value):
        raise ParameterError(f"Field {name!r} must be finite, got {raw!r}")
    return value


def _require(form: Mapping[str, str], name: str) -> str:
    value = form.get(name)
    if value is None or not str(value).strip():
        raise ParameterError(f"Missing required field: {name!r}")
    return str(value).strip()


def handle_cover(form: Mapping[str, str]) -> Response:
    """
    Cover the GeoJSON geometries with hierarchical cells

    Fields: geojson, max_level_geojson, min_level_geojson

    Examples:
        >>> response = handle_cover({
        ...     "geojson": '{"type": "Point", "coordinates": [-122.4194, 37.7749]}',
        ...     "max_level_geojson": "15",
        ...     "min_level_geojson": "1",
        ... })
        >>> response.status
        200
    """

    def run() -> dict[str, Any]:
        max_level = parse_int(form, "max_level_geojson")
        min_level = parse_int(form, "min_level_geojson")
        return cover_geojson(form.get("geojson", ""), max_level, min_level)

    return _respond("cover", run)


def handle_cover_h3(form: Mapping[str, str]) -> Response:
    """
    Fill the GeoJSON polygons with compacted hexagons

    Fields: geojson, h3_resolution
    """

    def run() -> dict[str, Any]:
        resolution = parse_int(form, "h3_resolution")
        return cover_geojson_h3(form.get("geojson", ""), resolution)

    return _respond("cover_h3", run)


def handle_check_intersection(
    form: Mapping[str, str], config: CoverageConfig = DEFAULT_CONFIG
) -> Response:
    """
    Check the GeoJSON geometries against a point and a circle

    Fields: geojson, lat, lng, radius, max_level_geojson, min_level_geojson,
    max_level_circle
    """

    def run() -> dict[str, Any]:
        return check_intersection(
            form.get("geojson", ""),
            lat=parse_float(form, "lat"),
            lng=parse_float(form, "lng"),
            radius=parse_float(form, "radius"),
            max_level=parse_int(form, "max_level_geojson"),
            min_level=parse_int(form, "min_level_geojson"),
            max_level_circle=parse_int(form, "max_level_circle"),
            config=config,
        )

    return _respond("check_intersection", run)


def _respond(name: str, run: Callable[[], dict[str, Any]]) -> Response:
    try:
        return Response(status=200, body=run())
    except CLIENT_ERRORS as e:
        logger.info("%s rejected: %s", name, e)
        return Response(status=400, body={"error": str(e)})
    except CellQueryError as e:
        logger.error("%s failed: %s", name, e)
        return Response(status=500, body={"error": str(e)})
