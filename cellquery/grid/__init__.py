"""
CellQuery Grid Module

Hierarchical cube-sphere cells and hexagonal H3 cells.
"""

from cellquery.grid.cell_id import CellId
from cellquery.grid.hex_grid import (
    compact_hex,
    hex_to_polygon_coordinates,
    polyfill_hex,
    uncompact_hex,
)

__all__ = [
    "CellId",
    "compact_hex",
    "hex_to_polygon_coordinates",
    "polyfill_hex",
    "uncompact_hex",
]
