"""
CellQuery Test Configuration

Shared pytest fixtures for all tests.
"""

import json

import pytest

from cellquery.core.geometry import Point, Polygon


@pytest.fixture
def unit_square():
    """Square with corners (0,0), (0,1), (1,1), (1,0)"""
    return Polygon.from_lnglat([[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]])


@pytest.fixture
def unit_square_geojson():
    """Unit square as a GeoJSON Polygon geometry"""
    return json.dumps(
        {"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]]}
    )


@pytest.fixture
def san_francisco():
    """San Francisco city hall area"""
    return Point(lat=37.7749, lng=-122.4194)


@pytest.fixture
def mixed_collection():
    """FeatureCollection with a polygon, a point, and a line"""
    return json.dumps(
        {
            "type": "FeatureCollection",
            "features": [
                {
                    "type": "Feature",
                    "properties": {"name": "square"},
                    "geometry": {
                        "type": "Polygon",
                        "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]],
                    },
                },
                {
                    "type": "Feature",
                    "properties": {"name": "sf"},
                    "geometry": {"type": "Point", "coordinates": [-122.4194, 37.7749]},
                },
                {
                    "type": "Feature",
                    "properties": {"name": "line"},
                    "geometry": {"type": "LineString", "coordinates": [[0, 0], [2, 2]]},
                },
            ],
        }
    )
