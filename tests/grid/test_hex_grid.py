"""
Tests for the hexagonal grid fill and compaction
"""

import h3
import pytest
from shapely.geometry import Point as ShapelyPoint

from cellquery.core.exceptions import InvalidLevelRange, ValidationError
from cellquery.core.geometry import Polygon
from cellquery.grid.hex_grid import (
    child_count,
    compact_hex,
    hex_to_polygon_coordinates,
    polyfill_hex,
    uncompact_hex,
)

RESOLUTION = 6


@pytest.fixture
def filled(unit_square):
    return polyfill_hex(unit_square, RESOLUTION)


class TestPolyfill:
    """Test polygon fill"""

    def test_not_empty(self, filled):
        assert len(filled) > 100

    def test_resolution(self, filled):
        assert {h3.get_resolution(cell) for cell in filled} == {RESOLUTION}

    def test_centers_inside(self, filled, unit_square):
        shape = unit_square.to_shapely()
        for cell in filled:
            lat, lng = h3.cell_to_latlng(cell)
            assert shape.contains(ShapelyPoint(lng, lat))

    def test_no_missing_cells(self, filled, unit_square):
        """Every neighbor left out has its center outside the polygon"""
        shape = unit_square.to_shapely()
        border = {n for cell in filled for n in h3.grid_disk(cell, 1)} - filled
        assert border
        for cell in border:
            lat, lng = h3.cell_to_latlng(cell)
            assert not shape.contains(ShapelyPoint(lng, lat))

    def test_thin_diagonal_band(self):
        """A band filling little of its bounding box loses no cells"""
        band = Polygon.from_lnglat([[0.0, 0.0], [0.2, 0.0], [2.2, 2.0], [2.0, 2.0]])
        shape = band.to_shapely()
        cells = polyfill_hex(band, RESOLUTION)
        assert len(cells) > 50
        for cell in cells:
            lat, lng = h3.cell_to_latlng(cell)
            assert shape.contains(ShapelyPoint(lng, lat))
        border = {n for cell in cells for n in h3.grid_disk(cell, 1)} - cells
        for cell in border:
            lat, lng = h3.cell_to_latlng(cell)
            assert not shape.contains(ShapelyPoint(lng, lat))

    def test_small_polygon_without_centers(self):
        """A polygon smaller than one hexagon may contain no center"""
        tiny = Polygon.from_lnglat([[10.0, 10.0], [10.0001, 10.0], [10.0001, 10.0001]])
        assert polyfill_hex(tiny, 2) == set()

    def test_invalid_resolution(self, unit_square):
        with pytest.raises(InvalidLevelRange):
            polyfill_hex(unit_square, 16)


class TestCompact:
    """Test hexagon compaction"""

    def test_never_grows(self, filled):
        assert len(compact_hex(filled)) <= len(filled)

    def test_matches_h3(self, filled):
        assert compact_hex(filled) == set(h3.compact_cells(list(filled)))

    def test_area_preserved(self, filled):
        assert uncompact_hex(compact_hex(filled), RESOLUTION) == filled

    def test_merges_complete_groups(self, filled):
        compacted = compact_hex(filled)
        assert any(h3.get_resolution(cell) < RESOLUTION for cell in compacted)

    def test_full_subtree_collapses(self):
        parent = h3.latlng_to_cell(10.0, 20.0, 4)
        grandchildren = h3.cell_to_children(parent, 6)
        assert compact_hex(grandchildren) == {parent}

    def test_incomplete_group_kept(self):
        parent = h3.latlng_to_cell(10.0, 20.0, 4)
        children = sorted(h3.cell_to_children(parent, 5))[1:]
        assert compact_hex(children) == set(children)

    def test_pentagon(self):
        pentagon = sorted(h3.get_pentagons(3))[0]
        children = h3.cell_to_children(pentagon, 4)
        assert child_count(pentagon) == 6
        assert len(children) == 6
        assert compact_hex(children) == {pentagon}

    def test_empty(self):
        assert compact_hex([]) == set()

    def test_invalid_cell(self):
        with pytest.raises(ValidationError):
            compact_hex(["not-a-cell"])


class TestUncompact:
    """Test expansion to a single resolution"""

    def test_expand(self):
        parent = h3.latlng_to_cell(10.0, 20.0, 4)
        assert uncompact_hex([parent], 5) == set(h3.cell_to_children(parent, 5))

    def test_finer_than_target(self):
        cell = h3.latlng_to_cell(10.0, 20.0, 6)
        with pytest.raises(ValidationError):
            uncompact_hex([cell], 5)


class TestBoundary:
    """Test hexagon boundaries"""

    def test_hexagon(self):
        cell = h3.latlng_to_cell(37.7749, -122.4194, 9)
        vertices = hex_to_polygon_coordinates(cell)
        assert len(vertices) == 6

    def test_pentagon(self):
        pentagon = sorted(h3.get_pentagons(5))[0]
        assert len(hex_to_polygon_coordinates(pentagon)) == 5

    def test_vertices_surround_center(self):
        cell = h3.latlng_to_cell(37.7749, -122.4194, 9)
        vertices = hex_to_polygon_coordinates(cell)
        lat, lng = h3.cell_to_latlng(cell)
        lats = [v.lat for v in vertices]
        lngs = [v.lng for v in vertices]
        assert min(lats) < lat < max(lats)
        assert min(lngs) < lng < max(lngs)

    def test_invalid_cell(self):
        with pytest.raises(ValidationError):
            hex_to_polygon_coordinates("zzz")
