"""
GeoJSON decoding

Accepts a FeatureCollection, a single Feature, or a bare geometry and
returns a flat list of features. Geometries are validated with shapely;
anything shapely cannot build is reported as a DecodeError.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from shapely.errors import ShapelyError
from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from cellquery.core.exceptions import DecodeError

logger = logging.getLogger(__name__)

GEOMETRY_TYPES = {
    "Point",
    "MultiPoint",
    "LineString",
    "MultiLineString",
    "Polygon",
    "MultiPolygon",
    "GeometryCollection",
}


@dataclass
class Feature:
    """
    Decoded GeoJSON feature

    Attributes:
        geometry: Shapely geometry, or None for features without one
        properties: Feature properties (empty for bare geometries)

    Examples:
        >>> [f] = decode_geojson('{"type": "Point", "coordinates": [-122.4, 37.8]}')
        >>> f.is_point()
        True
        >>> f.point
        [-122.4, 37.8]
    """

    geometry: BaseGeometry | None
    properties: dict[str, Any] = field(default_factory=dict)

    @property
    def geometry_type(self) -> str | None:
        return None if self.geometry is None else self.geometry.geom_type

    def is_polygon(self) -> bool:
        return self.geometry_type == "Polygon"

    def is_point(self) -> bool:
        return self.geometry_type == "Point"

    @property
    def polygon(self) -> list[list[list[float]]]:
        """Rings (exterior first) as lists of [lng, lat] positions"""
        if not self.is_polygon() or self.geometry.is_empty:
            return []
        rings = [self.geometry.exterior, *self.geometry.interiors]
        return [[[x, y] for x, y, *_ in ring.coords] for ring in rings]

    @property
    def point(self) -> list[float]:
        """Position as [lng, lat]"""
        if not self.is_point() or self.geometry.is_empty:
            return []
        return [self.geometry.x, self.geometry.y]


def decode_geojson(payload: str | bytes) -> list[Feature]:
    """
    Decode GeoJSON text into features

    Args:
        payload: GeoJSON document

    Returns:
        Features in document order

    Raises:
        DecodeError: If the payload is not valid JSON or not valid GeoJSON
    """
    try:
        document = json.loads(payload)
    except (TypeError, ValueError) as e:
        raise DecodeError(f"Invalid GeoJSON: {e}") from e

    if not isinstance(document, dict):
        raise DecodeError("Invalid GeoJSON: expected an object")

    kind = document.get("type")
    if kind == "FeatureCollection":
        raw_features = document.get("features")
        if not isinstance(raw_features, list):
            raise DecodeError("Invalid GeoJSON: FeatureCollection without a features list")
    elif kind == "Feature":
        raw_features = [document]
    elif kind in GEOMETRY_TYPES:
        raw_features = [{"type": "Feature", "geometry": document}]
    else:
        raise DecodeError(f"Invalid GeoJSON: unknown type {kind!r}")

    features = [_decode_feature(raw) for raw in raw_features]
    logger.debug("Decoded %d GeoJSON features", len(features))
    return features


def _decode_feature(raw: Any) -> Feature:
    if not isinstance(raw, dict) or raw.get("type") != "Feature":
        raise DecodeError("Invalid GeoJSON: expected a Feature")

    properties = raw.get("properties") or {}
    geometry = raw.get("geometry")
    if geometry is None:
        return Feature(geometry=None, properties=properties)
    if not isinstance(geometry, dict) or geometry.get("type") not in GEOMETRY_TYPES:
        raise DecodeError("Invalid GeoJSON: malformed geometry")

    try:
        return Feature(geometry=shape(geometry), properties=properties)
    except (ShapelyError, ValueError, TypeError, KeyError, IndexError, AttributeError) as e:
        raise DecodeError(f"Invalid GeoJSON geometry: {e}") from e
