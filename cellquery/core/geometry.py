"""
Geometry Model

Plain value types for geographic points and polygons.
"""

import math
from dataclasses import dataclass
from typing import Sequence

from shapely.geometry import Polygon as ShapelyPolygon

from cellquery.core.exceptions import ValidationError


@dataclass(frozen=True)
class Point:
    """
    Geographic point in decimal degrees

    Attributes:
        lat: Latitude (-90 to 90)
        lng: Longitude (-180 to 180)

    Examples:
        >>> Point(lat=37.7749, lng=-122.4194)
        Point(lat=37.7749, lng=-122.4194)
        >>> Point.from_lnglat([-122.4194, 37.7749])  # GeoJSON order
        Point(lat=37.7749, lng=-122.4194)
    """

    lat: float
    lng: float

    def __post_init__(self):
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise ValidationError(f"Coordinates must be finite, got ({self.lat}, {self.lng})")
        if not -90.0 <= self.lat <= 90.0:
            raise ValidationError(f"Latitude must be in [-90, 90], got {self.lat}")
        if not -180.0 <= self.lng <= 180.0:
            raise ValidationError(f"Longitude must be in [-180, 180], got {self.lng}")

    @classmethod
    def from_lnglat(cls, coords: Sequence[float]) -> "Point":
        """Build a point from a GeoJSON [lng, lat] position"""
        if len(coords) < 2:
            raise ValidationError(f"Position needs at least 2 values, got {list(coords)}")
        return cls(lat=float(coords[1]), lng=float(coords[0]))

    def to_vector(self) -> tuple[float, float, float]:
        """Unit vector on the sphere"""
        phi = math.radians(self.lat)
        theta = math.radians(self.lng)
        cos_phi = math.cos(phi)
        return (math.cos(theta) * cos_phi, math.sin(theta) * cos_phi, math.sin(phi))

    @classmethod
    def from_vector(cls, x: float, y: float, z: float) -> "Point":
        """Point for a (not necessarily unit) vector"""
        lat = math.degrees(math.atan2(z, math.sqrt(x * x + y * y)))
        lng = math.degrees(math.atan2(y, x))
        return cls(lat=lat, lng=lng)

    def to_latlng(self) -> list[float]:
        return [self.lat, self.lng]

    def to_lnglat(self) -> list[float]:
        return [self.lng, self.lat]


@dataclass(frozen=True)
class Polygon:
    """
    Polygon as a single implicitly closed ring

    A closing vertex equal to the first one is dropped, so ``points`` holds
    each vertex once. Self-intersection is not checked.

    Examples:
        >>> square = Polygon.from_lnglat([[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]])
        >>> len(square.points)
        4
    """

    points: tuple[Point, ...]

    def __post_init__(self):
        points = tuple(self.points)
        if len(points) > 1 and points[0] == points[-1]:
            points = points[:-1]
        object.__setattr__(self, "points", points)

        if len(set(points)) < 3:
            raise ValidationError(
                f"Polygon needs at least 3 distinct vertices, got {len(set(points))}"
            )

    @classmethod
    def from_lnglat(cls, ring: Sequence[Sequence[float]]) -> "Polygon":
        """Build a polygon from a GeoJSON ring of [lng, lat] positions"""
        return cls(points=tuple(Point.from_lnglat(p) for p in ring))

    def to_shapely(self) -> ShapelyPolygon:
        """Planar shapely polygon in (lng, lat) axis order"""
        return ShapelyPolygon([(p.lng, p.lat) for p in self.points])

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """Bounding box as (min_lng, min_lat, max_lng, max_lat)"""
        lngs = [p.lng for p in self.points]
        lats = [p.lat for p in self.points]
        return (min(lngs), min(lats), max(lngs), max(lats))
