"""
Tests for GeoJSON decoding
"""

import json

import pytest

from cellquery.core.exceptions import DecodeError
from cellquery.io.geojson import decode_geojson

SQUARE = [[0.0, 0.0], [1.0, 0.0], [1.0, 1.0], [0.0, 1.0], [0.0, 0.0]]
HOLE = [[0.25, 0.25], [0.75, 0.25], [0.75, 0.75], [0.25, 0.75], [0.25, 0.25]]


def _dumps(geometry, properties=None):
    return json.dumps({"type": "Feature", "geometry": geometry, "properties": properties})


class TestDecode:
    """Test accepted document shapes"""

    def test_feature_collection(self, mixed_collection):
        features = decode_geojson(mixed_collection)
        assert [f.geometry_type for f in features] == ["Polygon", "Point", "LineString"]

    def test_single_feature(self):
        [feature] = decode_geojson(
            _dumps({"type": "Point", "coordinates": [2.35, 48.86]}, {"name": "Paris"})
        )
        assert feature.is_point()
        assert feature.properties == {"name": "Paris"}

    def test_bare_geometry(self, unit_square_geojson):
        [feature] = decode_geojson(unit_square_geojson)
        assert feature.is_polygon()
        assert feature.properties == {}

    def test_bytes_payload(self, unit_square_geojson):
        [feature] = decode_geojson(unit_square_geojson.encode())
        assert feature.is_polygon()

    def test_empty_collection(self):
        assert decode_geojson('{"type": "FeatureCollection", "features": []}') == []

    def test_null_geometry(self):
        [feature] = decode_geojson(_dumps(None))
        assert feature.geometry is None
        assert feature.geometry_type is None
        assert not feature.is_polygon()
        assert not feature.is_point()


class TestAccessors:
    """Test coordinate accessors"""

    def test_point(self):
        [feature] = decode_geojson('{"type": "Point", "coordinates": [-122.4194, 37.7749]}')
        assert feature.point == [-122.4194, 37.7749]
        assert feature.polygon == []

    def test_polygon_ring(self):
        [feature] = decode_geojson(json.dumps({"type": "Polygon", "coordinates": [SQUARE]}))
        assert feature.polygon == [SQUARE]
        assert feature.point == []

    def test_polygon_with_hole(self):
        [feature] = decode_geojson(json.dumps({"type": "Polygon", "coordinates": [SQUARE, HOLE]}))
        rings = feature.polygon
        assert len(rings) == 2
        assert rings[0] == SQUARE
        assert rings[1] == HOLE

    def test_multipolygon_unsupported(self):
        [feature] = decode_geojson(
            json.dumps({"type": "MultiPolygon", "coordinates": [[SQUARE]]})
        )
        assert feature.geometry_type == "MultiPolygon"
        assert not feature.is_polygon()
        assert not feature.is_point()


class TestInvalid:
    """Test rejected documents"""

    @pytest.mark.parametrize(
        "payload",
        [
            "",
            "not json",
            "[1, 2, 3]",
            '{"type": "Circle", "coordinates": [0, 0]}',
            '{"type": "FeatureCollection"}',
            '{"type": "FeatureCollection", "features": [{"type": "Point"}]}',
            '{"type": "Feature", "geometry": {"type": "Blob"}}',
        ],
    )
    def test_invalid_document(self, payload):
        with pytest.raises(DecodeError):
            decode_geojson(payload)

    def test_short_ring(self):
        payload = json.dumps({"type": "Polygon", "coordinates": [[[0, 0], [1, 1]]]})
        with pytest.raises(DecodeError):
            decode_geojson(payload)

    def test_missing_coordinates(self):
        with pytest.raises(DecodeError):
            decode_geojson('{"type": "Point"}')
