"""
Hexagonal Grid Index

Polygon fill and compaction over H3 hexagonal cells. Cell addressing
(point to cell, parent/child navigation, boundaries) comes from the h3
library; filling and compaction are done here.

Examples:
    >>> square = Polygon.from_lnglat([[0, 0], [1, 0], [1, 1], [0, 1]])
    >>> cells = polyfill_hex(square, 6)
    >>> compacted = compact_hex(cells)
    >>> len(compacted) <= len(cells)
    True
"""

import logging
import math
from collections import defaultdict
from typing import Iterable

import h3
import numpy as np
import shapely

from cellquery.config import DEFAULT_CONFIG
from cellquery.core.exceptions import ValidationError
from cellquery.core.geometry import Point, Polygon
from cellquery.grid.cell_id import check_level

logger = logging.getLogger(__name__)

MAX_RESOLUTION = 15

# Sample spacing as a fraction of the average edge length. Half an edge keeps
# at least one sample inside the inscribed circle of every hexagon.
SAMPLE_SPACING = 0.5


def polyfill_hex(polygon: Polygon, resolution: int) -> set[str]:
    """
    Cells at ``resolution`` whose center lies inside ``polygon``

    Candidates are gathered by sampling the polygon's bounding box on a
    lattice finer than the hexagon size; each candidate's center is then
    tested against the polygon (planar, lng/lat axes). Samples further than
    one lattice step from the polygon are dropped before any cell lookup, so
    the number of lookups follows the polygon's area rather than its
    bounding box. It is still a few lookups per output cell, and the
    lattice itself grows with the bounding box.

    Args:
        polygon: Ring to fill
        resolution: H3 resolution (0-15)

    Returns:
        Set of H3 cell indexes
    """
    check_level(resolution, MAX_RESOLUTION)

    shape = polygon.to_shapely()
    min_lng, min_lat, max_lng, max_lat = polygon.bounds
    step_km = SAMPLE_SPACING * h3.average_hexagon_edge_length(resolution, unit="km")
    lat_step = math.degrees(step_km / DEFAULT_CONFIG.earth_radius_km)

    # Degrees of longitude are longest at the latitude closest to the equator
    if min_lat <= 0 <= max_lat:
        widest_lat = 0.0
    else:
        widest_lat = min(abs(min_lat), abs(max_lat))
    lng_step = lat_step / max(math.cos(math.radians(widest_lat)), 1e-12)

    lats = np.linspace(min_lat, max_lat, int(math.ceil((max_lat - min_lat) / lat_step)) + 1)
    lngs = np.linspace(min_lng, max_lng, int(math.ceil((max_lng - min_lng) / lng_step)) + 1)
    grid_lat, grid_lng = np.meshgrid(lats, lngs, indexing="ij")
    grid_lat, grid_lng = grid_lat.ravel(), grid_lng.ravel()

    # The sample closest to an inside center is within one step of the polygon
    near = shapely.contains_xy(shape.buffer(max(lat_step, lng_step)), grid_lng, grid_lat)

    candidates = {
        h3.latlng_to_cell(float(lat), float(lng), resolution)
        for lat, lng in zip(grid_lat[near], grid_lng[near])
    }
    if not candidates:
        return set()

    ordered = sorted(candidates)
    centers = np.array([h3.cell_to_latlng(cell) for cell in ordered])
    inside = shapely.contains_xy(shape, centers[:, 1], centers[:, 0])

    cells = {cell for cell, keep in zip(ordered, inside) if keep}
    logger.debug(
        "Filled polygon at resolution %d: %d cells from %d candidates (%d of %d samples)",
        resolution,
        len(cells),
        len(candidates),
        int(near.sum()),
        near.size,
    )
    return cells


def compact_hex(cells: Iterable[str]) -> set[str]:
    """
    Replace every complete group of siblings with their parent

    Merging repeats upward, so seven complete parents may in turn collapse
    into a grandparent. The covered area is unchanged.
    """
    by_resolution: dict[int, set[str]] = defaultdict(set)
    for cell in cells:
        _check_cell(cell)
        by_resolution[h3.get_resolution(cell)].add(cell)

    if not by_resolution:
        return set()

    for res in range(max(by_resolution), 0, -1):
        siblings: dict[str, set[str]] = defaultdict(set)
        for cell in by_resolution.get(res, ()):
            siblings[h3.cell_to_parent(cell, res - 1)].add(cell)

        kept: set[str] = set()
        for parent, children in siblings.items():
            if len(children) == child_count(parent):
                by_resolution[res - 1].add(parent)
            else:
                kept |= children
        by_resolution[res] = kept

    return set().union(*by_resolution.values())


def uncompact_hex(cells: Iterable[str], resolution: int) -> set[str]:
    """Expand compacted cells back to a single resolution"""
    check_level(resolution, MAX_RESOLUTION)
    expanded: set[str] = set()
    for cell in cells:
        _check_cell(cell)
        cell_res = h3.get_resolution(cell)
        if cell_res > resolution:
            raise ValidationError(
                f"Cell {cell} is finer than target resolution {resolution}"
            )
        if cell_res == resolution:
            expanded.add(cell)
        else:
            expanded.update(h3.cell_to_children(cell, resolution))
    return expanded


def child_count(cell: str) -> int:
    """Number of children one resolution finer (pentagons have six)"""
    return 6 if h3.is_pentagon(cell) else 7


def hex_to_polygon_coordinates(cell: str) -> list[Point]:
    """Boundary vertices of a cell: six for hexagons, five for pentagons"""
    _check_cell(cell)
    return [Point(lat=lat, lng=lng) for lat, lng in h3.cell_to_boundary(cell)]


def _check_cell(cell: str) -> None:
    if not isinstance(cell, str) or not h3.is_valid_cell(cell):
        raise ValidationError(f"Invalid H3 cell: {cell!r}")
