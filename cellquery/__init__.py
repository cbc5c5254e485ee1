"""
CellQuery - Spatial coverings and intersection queries for GeoJSON

Covers points and polygons with hierarchical cube-sphere cells or compacted
H3 hexagons, and checks geometries against a point and a circle.

Quick Start:
    >>> import cellquery as cq
    >>>
    >>> # Cover a polygon with cells between levels 5 and 10
    >>> square = cq.Polygon.from_lnglat([[0, 0], [1, 0], [1, 1], [0, 1]])
    >>> covering, tokens, vertices = cq.cover_polygon(square, max_level=10, min_level=5)
    >>>
    >>> # Cell containing a point
    >>> cell = cq.CellId.from_point(cq.Point(lat=37.7749, lng=-122.4194), level=15)
    >>> covering.intersects_cell(cell)
    False
    >>>
    >>> # Circle of 1km as at most 300 cells
    >>> circle = cq.cover_cap(cq.Point(lat=0.5, lng=0.5), 1000, max_level=15, max_cells=300)
    >>> covering.intersects(circle)
    True
"""

from cellquery.config import DEFAULT_CONFIG, CoverageConfig
from cellquery.core import (
    CellQueryError,
    DecodeError,
    InvalidLevelRange,
    InvalidToken,
    ParameterError,
    Point,
    Polygon,
    Response,
    ValidationError,
    handle_check_intersection,
    handle_cover,
    handle_cover_h3,
)
from cellquery.grid import CellId, compact_hex, hex_to_polygon_coordinates, polyfill_hex
from cellquery.io import Feature, decode_geojson
from cellquery.query import (
    CellUnion,
    check_intersection,
    cover_cap,
    cover_geojson,
    cover_geojson_h3,
    cover_point,
    cover_polygon,
)

__version__ = "0.1.0"

__all__ = [
    "CellId",
    "CellQueryError",
    "CellUnion",
    "CoverageConfig",
    "DEFAULT_CONFIG",
    "DecodeError",
    "Feature",
    "InvalidLevelRange",
    "InvalidToken",
    "ParameterError",
    "Point",
    "Polygon",
    "Response",
    "ValidationError",
    "__version__",
    "check_intersection",
    "compact_hex",
    "cover_cap",
    "cover_geojson",
    "cover_geojson_h3",
    "cover_point",
    "cover_polygon",
    "decode_geojson",
    "handle_check_intersection",
    "handle_cover",
    "handle_cover_h3",
    "hex_to_polygon_coordinates",
    "polyfill_hex",
]
