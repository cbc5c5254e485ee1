"""
CellQuery Query Module

Region coverings, intersection tests, and GeoJSON query orchestration.
"""

from cellquery.query.covering import cover_cap, cover_point, cover_polygon
from cellquery.query.intersection import CellUnion
from cellquery.query.spatial import check_intersection, cover_geojson, cover_geojson_h3

__all__ = [
    "CellUnion",
    "check_intersection",
    "cover_cap",
    "cover_geojson",
    "cover_geojson_h3",
    "cover_point",
    "cover_polygon",
]
