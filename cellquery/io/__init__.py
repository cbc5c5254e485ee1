"""
CellQuery IO Module

GeoJSON decoding.
"""

from cellquery.io.geojson import Feature, decode_geojson

__all__ = [
    "Feature",
    "decode_geojson",
]
