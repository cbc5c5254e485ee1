"""
Region Covering

Turns polygons, points and circular caps into coverings of hierarchical
cells.

Polygon tests run on the planar (lng, lat) projection with shapely, which
matches how GeoJSON rings are drawn. Cells are drawn in that plane by
sampling their geodesic edges; cells crossing the antimeridian are drawn on
both sides of it and cells touching a pole are widened to every longitude.
"""

import heapq
import logging
import math
from functools import lru_cache
from typing import NamedTuple

import numpy as np
import shapely
from shapely.affinity import translate
from shapely.geometry import Polygon as ShapelyPolygon
from shapely.geometry import box
from shapely.geometry.base import BaseGeometry

from cellquery.config import DEFAULT_CONFIG, CoverageConfig
from cellquery.core.exceptions import InvalidLevelRange, ValidationError
from cellquery.core.geometry import Point, Polygon
from cellquery.grid.cell_id import (
    CellId,
    Vector,
    angle_between,
    check_level,
    face_cells,
    normalize,
)
from cellquery.query.intersection import CellUnion

logger = logging.getLogger(__name__)

# Samples per cell edge when drawing cells in the lng/lat plane
EDGE_SAMPLES = 8

# Slack on planar distances (degrees)
PLANAR_EPSILON = 1e-9

# Latitudes this close to +-90 count as the pole
POLE_EPSILON = 1e-9

# Slack on angle comparisons (radians)
ANGLE_EPSILON = 1e-12

_POLE_CELLS = (
    CellId.from_point(Point(lat=90.0, lng=0.0)),
    CellId.from_point(Point(lat=-90.0, lng=0.0)),
)


class CapRegion:
    """
    Spherical cap: every point within ``angle`` radians of ``center``

    Examples:
        >>> cap = CapRegion.from_radius(Point(lat=0, lng=0), radius_m=1000)
        >>> cap.may_intersect(CellId.from_point(Point(lat=0, lng=0), 12))
        True
    """

    def __init__(self, center: Vector, angle: float):
        self.center = normalize(center)
        self.angle = min(max(angle, 0.0), math.pi)

    @classmethod
    def from_radius(
        cls, center: Point, radius_m: float, config: CoverageConfig = DEFAULT_CONFIG
    ) -> "CapRegion":
        if not math.isfinite(radius_m) or radius_m < 0:
            raise ValidationError(f"Radius must be a non-negative number, got {radius_m}")
        return cls(center.to_vector(), config.radius_to_angle(radius_m))

    @property
    def is_full(self) -> bool:
        return self.angle >= math.pi

    def may_intersect(self, cell: CellId) -> bool:
        if self.is_full:
            return True
        distance = angle_between(self.center, cell.center_vector())
        return distance <= self.angle + cell.bounding_angle() + ANGLE_EPSILON

    def contains_cell(self, cell: CellId) -> bool:
        if self.is_full:
            return True
        # Caps larger than a hemisphere are not convex
        if self.angle > math.pi / 2:
            return False
        return all(angle_between(self.center, v) <= self.angle for v in cell.vertex_vectors())


class CellOutline(NamedTuple):
    """
    Planar (lng, lat) rendering of a cell

    Attributes:
        shapes: One polygon, or two copies 360 degrees apart for cells
            crossing the antimeridian
        margin: Largest distance (degrees) between the sampled outline and
            the cell's geodesic edges
        exact: False when ``shapes`` over-approximates the cell (polar cells)
    """

    shapes: tuple[BaseGeometry, ...]
    margin: float
    exact: bool


@lru_cache(maxsize=4096)
def cell_outline(cell: CellId) -> CellOutline:
    """
    Outline of ``cell`` sampled along its geodesic edges

    Each edge is sampled at ``EDGE_SAMPLES`` points; the midpoints between
    samples measure how far the straight lng/lat chords stray from the
    curved edge, which becomes the outline's margin.
    """
    corners = np.array(cell.vertex_vectors())
    following = np.roll(corners, -1, axis=0)
    t = np.arange(2 * EDGE_SAMPLES) / (2 * EDGE_SAMPLES)
    points = (
        corners[:, None, :] * (1 - t)[None, :, None] + following[:, None, :] * t[None, :, None]
    ).reshape(-1, 3)
    points /= np.linalg.norm(points, axis=1)[:, None]

    lats = np.degrees(np.arctan2(points[:, 2], np.hypot(points[:, 0], points[:, 1])))
    lngs = np.degrees(np.arctan2(points[:, 1], points[:, 0]))

    # Cells touching a pole span every longitude above their lowest latitude
    if np.abs(lats).max() >= 90.0 - POLE_EPSILON or any(cell.contains(p) for p in _POLE_CELLS):
        if lats.mean() > 0:
            polar = box(-180.0, float(lats.min()), 180.0, 90.0)
        else:
            polar = box(-180.0, -90.0, 180.0, float(lats.max()))
        return CellOutline((polar,), 0.0, False)

    wrapped = lngs.max() - lngs.min() > 180.0
    if wrapped:
        lngs = np.where(lngs < 0, lngs + 360.0, lngs)

    xy = np.column_stack([lngs, lats])
    outline, midpoints = xy[0::2], xy[1::2]
    chords = (outline + np.roll(outline, -1, axis=0)) / 2
    margin = 2.0 * float(np.hypot(*(midpoints - chords).T).max()) + PLANAR_EPSILON

    shape = ShapelyPolygon(outline)
    if wrapped:
        return CellOutline((shape, translate(shape, xoff=-360.0)), margin, False)
    return CellOutline((shape,), margin, True)


class PolygonRegion:
    """
    Polygon ring with cell intersection and containment tests

    A cell may intersect the polygon when its outline comes within the
    outline's margin of the polygon, and lies inside it when the outline
    stays further than the margin from the polygon's boundary.
    """

    def __init__(self, polygon: Polygon):
        self.polygon = polygon
        self.shape = polygon.to_shapely()
        self.boundary = self.shape.boundary
        shapely.prepare(self.shape)

    def may_intersect(self, cell: CellId) -> bool:
        outline = cell_outline(cell)
        return any(
            self.shape.intersects(shape) or self.shape.distance(shape) <= outline.margin
            for shape in outline.shapes
        )

    def contains_cell(self, cell: CellId) -> bool:
        outline = cell_outline(cell)
        if not outline.exact:
            return False
        [shape] = outline.shapes
        return self.shape.contains(shape) and self.boundary.distance(shape) > outline.margin


def check_level_range(max_level: int, min_level: int) -> None:
    check_level(max_level)
    check_level(min_level)
    if max_level < min_level:
        raise InvalidLevelRange(
            f"max_level ({max_level}) must not be smaller than min_level ({min_level})"
        )


def cover_polygon(
    polygon: Polygon, max_level: int, min_level: int
) -> tuple[CellUnion, list[str], list[list[Point]]]:
    """
    Cover a polygon with cells between ``min_level`` and ``max_level``

    Refinement runs top-down from the cube faces. Cells coarser than
    ``min_level`` are always split; from ``min_level`` on a cell is accepted
    once it lies inside the polygon or reaches ``max_level``. Children that
    miss the polygon are dropped.

    Args:
        polygon: Ring to cover
        max_level: Finest level emitted (precision)
        min_level: Coarsest level emitted (bounds covering size)

    Returns:
        (covering, tokens, vertex sets), tokens and vertex sets in covering order

    Raises:
        InvalidLevelRange: If a level is out of range or max_level < min_level
    """
    check_level_range(max_level, min_level)
    region = PolygonRegion(polygon)

    accepted: list[CellId] = []
    pending = [face for face in face_cells() if region.may_intersect(face)]
    while pending:
        cell = pending.pop()
        if cell.level >= min_level and (
            cell.level >= max_level or region.contains_cell(cell)
        ):
            accepted.append(cell)
            continue
        pending.extend(child for child in cell.children() if region.may_intersect(child))

    covering = CellUnion(accepted)
    logger.debug(
        "Covered polygon (%d vertices) with %d cells, levels %d-%d",
        len(polygon.points),
        len(covering),
        min_level,
        max_level,
    )
    return covering, tokens_of(covering), vertices_of(covering)


def cover_point(point: Point, max_level: int) -> tuple[CellUnion, str, list[Point]]:
    """Single cell at ``max_level`` containing ``point``"""
    cell = CellId.from_point(point, max_level)
    return CellUnion([cell]), cell.to_token(), cell.vertices()


def cover_cap(
    center: Point,
    radius_m: float,
    max_level: int,
    max_cells: int,
    config: CoverageConfig = DEFAULT_CONFIG,
) -> CellUnion:
    """
    Cover a circle of ``radius_m`` meters around ``center``

    Cells are refined coarsest first. A cell is split only while the total
    number of cells stays within ``max_cells``; otherwise it is kept whole,
    trading precision for the budget. Cells at ``max_level`` or inside the
    cap are never split. The budget cannot go below the number of cube
    faces the cap touches.

    Raises:
        ValidationError: If the radius is negative or ``max_cells`` < 1
        InvalidLevelRange: If ``max_level`` is out of range
    """
    check_level(max_level)
    if max_cells < 1:
        raise ValidationError(f"max_cells must be at least 1, got {max_cells}")
    region = CapRegion.from_radius(center, radius_m, config)

    accepted: list[CellId] = []
    candidates = [(face.level, face.id) for face in face_cells() if region.may_intersect(face)]
    heapq.heapify(candidates)

    while candidates:
        level, cell_id = heapq.heappop(candidates)
        cell = CellId(cell_id)
        if level >= max_level or region.contains_cell(cell):
            accepted.append(cell)
            continue

        children = [child for child in cell.children() if region.may_intersect(child)]
        if len(accepted) + len(candidates) + len(children) > max_cells:
            accepted.append(cell)
            continue
        for child in children:
            heapq.heappush(candidates, (child.level, child.id))

    covering = CellUnion(accepted).normalize()
    logger.debug(
        "Covered cap (radius %.1fm, max_level %d) with %d cells",
        radius_m,
        max_level,
        len(covering),
    )
    return covering


def tokens_of(covering: CellUnion) -> list[str]:
    return [cell.to_token() for cell in covering]


def vertices_of(covering: CellUnion) -> list[list[Point]]:
    return [cell.vertices() for cell in covering]
