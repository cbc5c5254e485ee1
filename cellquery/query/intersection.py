"""
Intersection Tester

CellUnion holds a covering as a sorted list of cell identifiers with nested
cells removed. With that invariant, "does any member intersect cell c"
needs only the two members adjacent to c in sort order, found by bisection.
"""

import bisect
from typing import Iterable, Iterator

from cellquery.grid.cell_id import CellId


class CellUnion:
    """
    Immutable set of hierarchical cells

    Two cells intersect when one contains the other (or they are equal), so
    a coarse cell intersects every one of its descendants.

    Examples:
        >>> parent = CellId.from_face(0).children()[2]
        >>> union = CellUnion([parent])
        >>> union.intersects_cell(parent.children()[1])
        True
        >>> union.intersects(CellUnion([CellId.from_face(1)]))
        False
    """

    def __init__(self, cells: Iterable[CellId] = ()):
        self._cells = _prune_nested(sorted(set(cells)))
        self._ids = [cell.id for cell in self._cells]

    @classmethod
    def from_tokens(cls, tokens: Iterable[str]) -> "CellUnion":
        return cls(CellId.from_token(token) for token in tokens)

    # -------------------------------------------------------------------------
    # Container protocol
    # -------------------------------------------------------------------------

    def __iter__(self) -> Iterator[CellId]:
        return iter(self._cells)

    def __len__(self) -> int:
        return len(self._cells)

    def __contains__(self, cell: object) -> bool:
        if not isinstance(cell, CellId):
            return False
        i = bisect.bisect_left(self._ids, cell.id)
        return i < len(self._ids) and self._ids[i] == cell.id

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CellUnion):
            return NotImplemented
        return self._ids == other._ids

    def __repr__(self) -> str:
        return f"CellUnion({[cell.to_token() for cell in self._cells]})"

    @property
    def cells(self) -> list[CellId]:
        return list(self._cells)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def intersects_cell(self, cell: CellId) -> bool:
        """True if some member equals, contains, or lies inside ``cell``"""
        i = bisect.bisect_left(self._ids, cell.range_min)
        if i < len(self._cells) and self._cells[i].range_min <= cell.range_max:
            return True
        return i > 0 and self._cells[i - 1].range_max >= cell.range_min

    def contains_cell(self, cell: CellId) -> bool:
        """True if ``cell`` lies entirely inside one member"""
        i = bisect.bisect_left(self._ids, cell.id)
        if i < len(self._cells) and self._cells[i].range_min <= cell.id:
            return True
        return i > 0 and self._cells[i - 1].range_max >= cell.id

    def intersects(self, other: "CellUnion") -> bool:
        """True if any cell of either union intersects a cell of the other"""
        small, large = (self, other) if len(self) <= len(other) else (other, self)
        return any(large.intersects_cell(cell) for cell in small)

    def contains(self, other: "CellUnion") -> bool:
        """True if every cell of ``other`` lies inside this union"""
        return all(self.contains_cell(cell) for cell in other)

    def normalize(self, min_level: int = 0) -> "CellUnion":
        """
        Merge complete groups of four siblings into their parent

        Parents coarser than ``min_level`` are never produced.
        """
        output: list[CellId] = []
        for cell in self._cells:
            output.append(cell)
            # Merges can cascade: collapsing four children may complete the
            # sibling group one level up.
            while len(output) >= 4:
                last = output[-1]
                if last.level <= min_level:
                    break
                parent = last.parent()
                if [c.id for c in output[-4:]] != [c.id for c in parent.children()]:
                    break
                del output[-4:]
                output.append(parent)
        return CellUnion(output)


def _prune_nested(cells: list[CellId]) -> list[CellId]:
    """Drop cells contained in an earlier (coarser or equal) member"""
    pruned: list[CellId] = []
    for cell in cells:
        if pruned and pruned[-1].contains(cell):
            continue
        # A later cell can contain cells already kept; it replaces them.
        while pruned and cell.contains(pruned[-1]):
            pruned.pop()
        pruned.append(cell)
    return pruned
