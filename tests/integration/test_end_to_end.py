"""
End-to-End Integration Tests

Tests the complete workflow from form fields to response bodies.
"""

import json

import h3
import pytest

from cellquery import CellId, Point
from cellquery.core.api import handle_check_intersection, handle_cover, handle_cover_h3
from cellquery.query.covering import cover_cap


class TestEndToEndWorkflow:
    """Integration test for complete workflow"""

    def test_square_covering_bounds(self, unit_square_geojson):
        """Covering of the unit square hugs the square at level 10"""
        response = handle_cover(
            {"geojson": unit_square_geojson, "max_level_geojson": "10", "min_level_geojson": "5"}
        )
        assert response.status == 200

        corners = [corner for cell in response.body["cells"] for corner in cell]
        assert corners
        lats = [lat for lat, _ in corners]
        lngs = [lng for _, lng in corners]

        # Level 10 cells are roughly 0.1 degrees across
        assert min(lats) == pytest.approx(0.0, abs=0.2)
        assert max(lats) == pytest.approx(1.0, abs=0.2)
        assert min(lngs) == pytest.approx(0.0, abs=0.2)
        assert max(lngs) == pytest.approx(1.0, abs=0.2)

        tokens = response.body["cell_tokens"].split(",")
        assert len(tokens) == len(response.body["cells"])
        assert all(5 <= CellId.from_token(t).level <= 10 for t in tokens)

    def test_point_covering(self):
        """A point covers to the one cell holding it"""
        payload = json.dumps({"type": "Point", "coordinates": [-122.4194, 37.7749]})
        response = handle_cover(
            {"geojson": payload, "max_level_geojson": "15", "min_level_geojson": "0"}
        )
        assert response.status == 200

        tokens = response.body["cell_tokens"].split(",")
        assert len(tokens) == 1
        expected = CellId.from_point(Point(lat=37.7749, lng=-122.4194), 15)
        assert CellId.from_token(tokens[0]) == expected

    def test_circle_inside_polygon(self, unit_square_geojson):
        response = handle_check_intersection(
            {
                "geojson": unit_square_geojson,
                "lat": "0.25",
                "lng": "0.75",
                "radius": "1000",
                "max_level_geojson": "12",
                "min_level_geojson": "5",
                "max_level_circle": "16",
            }
        )
        assert response.status == 200
        assert response.body["intersects_with_circle"] is True
        assert response.body["intersects_with_point"] is True

    def test_circle_cells_match_covering(self, unit_square_geojson):
        """The circle cells in the response outline the circle's covering"""
        response = handle_check_intersection(
            {
                "geojson": unit_square_geojson,
                "lat": "0.5",
                "lng": "0.5",
                "radius": "2000",
                "max_level_geojson": "10",
                "min_level_geojson": "5",
                "max_level_circle": "14",
            }
        )
        covering = cover_cap(Point(lat=0.5, lng=0.5), 2000, max_level=14, max_cells=300)
        expected = [[p.to_latlng() for p in cell.vertices()] for cell in covering]
        assert response.body["cells"] == expected
        assert covering.contains_cell(CellId.from_point(Point(lat=0.5, lng=0.5)))

    def test_hexagon_fill_preserves_area(self, unit_square_geojson):
        """Compacted hexagons expand back to the full fill"""
        response = handle_cover_h3({"geojson": unit_square_geojson, "h3_resolution": "6"})
        assert response.status == 200

        features = response.body["hexagons_geojson"]["features"]
        cells = set()
        for feature in features:
            ring = feature["geometry"]["coordinates"][0][:-1]
            lat = sum(lat for _, lat in ring) / len(ring)
            lng = sum(lng for lng, _ in ring) / len(ring)
            cells.add(_cell_for_outline(lat, lng, ring))

        expanded = set(h3.uncompact_cells(list(cells), 6))
        assert len(cells) < len(expanded)
        for cell in expanded:
            lat, lng = h3.cell_to_latlng(cell)
            assert 0.0 < lat < 1.0
            assert 0.0 < lng < 1.0


def _cell_for_outline(lat, lng, ring):
    """H3 cell whose boundary matches a rendered ring"""
    for res in range(16):
        cell = h3.latlng_to_cell(lat, lng, res)
        boundary = [[b_lng, b_lat] for b_lat, b_lng in h3.cell_to_boundary(cell)]
        if boundary == ring:
            return cell
    raise AssertionError(f"No cell with boundary {ring}")
