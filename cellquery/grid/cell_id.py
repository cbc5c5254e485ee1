"""
Hierarchical Cell Index

Cube-sphere quadtree over the unit sphere. The sphere is projected onto the
six faces of a cube; each face is recursively split into four children down
to level 30. Cells are addressed by 64-bit identifiers laid out as:

    fff ppppp...ppppp 1 000...000
    face  2 bits per    marker
          level (Hilbert
          position)

The Hilbert ordering keeps every descendant of a cell inside the contiguous
identifier range [range_min, range_max] of that cell, which turns
containment into two integer comparisons.
"""

import math
import re
from dataclasses import dataclass
from typing import Iterator

from cellquery.core.exceptions import InvalidLevelRange, InvalidToken
from cellquery.core.geometry import Point

MAX_LEVEL = 30
NUM_FACES = 6
POS_BITS = 2 * MAX_LEVEL + 1
MAX_SIZE = 1 << MAX_LEVEL

# Hilbert curve orientation bits
SWAP_MASK = 0x01
INVERT_MASK = 0x02

# POS_TO_IJ[orientation][pos] -> (i_bit << 1) | j_bit
POS_TO_IJ = (
    (0, 1, 3, 2),
    (0, 2, 3, 1),
    (3, 2, 0, 1),
    (3, 1, 0, 2),
)
IJ_TO_POS = (
    (0, 1, 3, 2),
    (0, 3, 1, 2),
    (2, 3, 1, 0),
    (2, 1, 3, 0),
)
POS_TO_ORIENTATION = (SWAP_MASK, 0, 0, INVERT_MASK | SWAP_MASK)

_TOKEN_RE = re.compile(r"[0-9a-fA-F]{1,16}")

Vector = tuple[float, float, float]


def check_level(level: int, max_level: int = MAX_LEVEL) -> int:
    """Validate a subdivision level, returning it unchanged"""
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidLevelRange(f"Level must be an integer, got {level!r}")
    if not 0 <= level <= max_level:
        raise InvalidLevelRange(f"Level must be in [0, {max_level}], got {level}")
    return level


def lsb_for_level(level: int) -> int:
    return 1 << (2 * (MAX_LEVEL - level))


# -----------------------------------------------------------------------------
# Projection helpers
# -----------------------------------------------------------------------------


def _xyz_to_face_uv(x: float, y: float, z: float) -> tuple[int, float, float]:
    ax, ay, az = abs(x), abs(y), abs(z)
    if ax > ay:
        face = 0 if ax > az else 2
    else:
        face = 1 if ay > az else 2
    if (x, y, z)[face] < 0:
        face += 3

    if face == 0:
        return face, y / x, z / x
    if face == 1:
        return face, -x / y, z / y
    if face == 2:
        return face, -x / z, -y / z
    if face == 3:
        return face, z / x, y / x
    if face == 4:
        return face, z / y, -x / y
    return face, -y / z, -x / z


def _face_uv_to_xyz(face: int, u: float, v: float) -> Vector:
    if face == 0:
        return (1.0, u, v)
    if face == 1:
        return (-u, 1.0, v)
    if face == 2:
        return (-u, -v, 1.0)
    if face == 3:
        return (-1.0, -v, -u)
    if face == 4:
        return (v, -1.0, -u)
    return (v, u, -1.0)


def _uv_to_st(u: float) -> float:
    # Quadratic projection keeps cell areas within a factor of ~2 of each other
    if u >= 0:
        return 0.5 * math.sqrt(1 + 3 * u)
    return 1 - 0.5 * math.sqrt(1 - 3 * u)


def _st_to_uv(s: float) -> float:
    if s >= 0.5:
        return (1 / 3.0) * (4 * s * s - 1)
    return (1 / 3.0) * (1 - 4 * (1 - s) * (1 - s))


def _st_to_ij(s: float) -> int:
    return max(0, min(MAX_SIZE - 1, int(math.floor(MAX_SIZE * s))))


def normalize(v: Vector) -> Vector:
    norm = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    return (v[0] / norm, v[1] / norm, v[2] / norm)


def angle_between(a: Vector, b: Vector) -> float:
    """Angle in radians between two vectors"""
    cx = a[1] * b[2] - a[2] * b[1]
    cy = a[2] * b[0] - a[0] * b[2]
    cz = a[0] * b[1] - a[1] * b[0]
    dot = a[0] * b[0] + a[1] * b[1] + a[2] * b[2]
    return math.atan2(math.sqrt(cx * cx + cy * cy + cz * cz), dot)


# -----------------------------------------------------------------------------
# Cell identifier
# -----------------------------------------------------------------------------


@dataclass(frozen=True, order=True)
class CellId:
    """
    Hierarchical cell identifier

    Examples:
        >>> cell = CellId.from_point(Point(lat=37.7749, lng=-122.4194), level=15)
        >>> cell.level
        15
        >>> CellId.from_token(cell.to_token()) == cell
        True
        >>> cell.parent(10).contains(cell)
        True
    """

    id: int

    # -------------------------------------------------------------------------
    # Constructors
    # -------------------------------------------------------------------------

    @classmethod
    def from_face(cls, face: int) -> "CellId":
        """Level-0 cell covering a whole cube face"""
        if not 0 <= face < NUM_FACES:
            raise ValueError(f"Face must be in [0, {NUM_FACES - 1}], got {face}")
        return cls((face << POS_BITS) + lsb_for_level(0))

    @classmethod
    def from_face_ij(cls, face: int, i: int, j: int) -> "CellId":
        """Leaf cell at integer face coordinates (i, j)"""
        n = face << (POS_BITS - 1)
        bits = face & SWAP_MASK
        for k in range(MAX_LEVEL - 1, -1, -1):
            ij = (((i >> k) & 1) << 1) | ((j >> k) & 1)
            pos = IJ_TO_POS[bits][ij]
            n |= pos << (2 * k)
            bits ^= POS_TO_ORIENTATION[pos]
        return cls(n * 2 + 1)

    @classmethod
    def from_point(cls, point: Point, level: int = MAX_LEVEL) -> "CellId":
        """Unique cell at ``level`` containing ``point``"""
        check_level(level)
        face, u, v = _xyz_to_face_uv(*point.to_vector())
        leaf = cls.from_face_ij(face, _st_to_ij(_uv_to_st(u)), _st_to_ij(_uv_to_st(v)))
        return leaf.parent(level)

    @classmethod
    def from_token(cls, token: str) -> "CellId":
        """
        Parse a token produced by ``to_token``

        Raises:
            InvalidToken: If the token is not hex, too long, or names no cell
        """
        if not isinstance(token, str) or not _TOKEN_RE.fullmatch(token):
            raise InvalidToken(f"Invalid cell token: {token!r}")
        cell = cls(int(token.ljust(16, "0"), 16))
        if not cell.is_valid:
            raise InvalidToken(f"Token does not name a valid cell: {token!r}")
        return cell

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------

    @property
    def is_valid(self) -> bool:
        if not 0 < self.id < (1 << 64):
            return False
        marker = self.lsb.bit_length() - 1
        return self.face < NUM_FACES and marker % 2 == 0 and marker <= 2 * MAX_LEVEL

    @property
    def face(self) -> int:
        return self.id >> POS_BITS

    @property
    def lsb(self) -> int:
        return self.id & -self.id

    @property
    def level(self) -> int:
        return MAX_LEVEL - (self.lsb.bit_length() - 1) // 2

    @property
    def is_leaf(self) -> bool:
        return bool(self.id & 1)

    @property
    def range_min(self) -> int:
        """Smallest leaf identifier contained in this cell"""
        return self.id - (self.lsb - 1)

    @property
    def range_max(self) -> int:
        """Largest leaf identifier contained in this cell"""
        return self.id + (self.lsb - 1)

    # -------------------------------------------------------------------------
    # Hierarchy
    # -------------------------------------------------------------------------

    def parent(self, level: int | None = None) -> "CellId":
        """Ancestor at ``level`` (default: the immediate parent)"""
        if level is None:
            level = self.level - 1
        if not 0 <= level <= self.level:
            raise InvalidLevelRange(f"Parent level must be in [0, {self.level}], got {level}")
        lsb = lsb_for_level(level)
        return CellId((self.id & -lsb) | lsb)

    def children(self) -> tuple["CellId", ...]:
        """The four children in Hilbert order"""
        if self.is_leaf:
            raise InvalidLevelRange("Leaf cells have no children")
        child_lsb = self.lsb >> 2
        first = self.id - self.lsb + child_lsb
        return tuple(CellId(first + k * 2 * child_lsb) for k in range(4))

    def contains(self, other: "CellId") -> bool:
        return self.range_min <= other.id <= self.range_max

    def intersects(self, other: "CellId") -> bool:
        """True if one cell contains the other"""
        return other.range_min <= self.range_max and other.range_max >= self.range_min

    # -------------------------------------------------------------------------
    # Encoding
    # -------------------------------------------------------------------------

    def to_token(self) -> str:
        """Hex identifier with trailing zeros removed"""
        if self.id == 0:
            return "X"
        return f"{self.id:016x}".rstrip("0")

    # -------------------------------------------------------------------------
    # Geometry
    # -------------------------------------------------------------------------

    def to_face_ij(self) -> tuple[int, int, int]:
        """Face and leaf coordinates of a leaf inside this cell"""
        face = self.face
        bits = face & SWAP_MASK
        i = j = 0
        for k in range(MAX_LEVEL - 1, -1, -1):
            pos = (self.id >> (2 * k + 1)) & 3
            ij = POS_TO_IJ[bits][pos]
            i |= (ij >> 1) << k
            j |= (ij & 1) << k
            bits ^= POS_TO_ORIENTATION[pos]
        return face, i, j

    def _uv_bounds(self) -> tuple[int, float, float, float, float]:
        face, i, j = self.to_face_ij()
        size = 1 << (MAX_LEVEL - self.level)
        i0 = i & -size
        j0 = j & -size
        u0 = _st_to_uv(i0 / MAX_SIZE)
        u1 = _st_to_uv((i0 + size) / MAX_SIZE)
        v0 = _st_to_uv(j0 / MAX_SIZE)
        v1 = _st_to_uv((j0 + size) / MAX_SIZE)
        return face, u0, u1, v0, v1

    def vertex_vectors(self) -> list[Vector]:
        """Unit vectors of the four corners, counter-clockwise"""
        face, u0, u1, v0, v1 = self._uv_bounds()
        corners = ((u0, v0), (u1, v0), (u1, v1), (u0, v1))
        return [normalize(_face_uv_to_xyz(face, u, v)) for u, v in corners]

    def vertices(self) -> list[Point]:
        """The four corners as geographic points"""
        return [Point.from_vector(*v) for v in self.vertex_vectors()]

    def center_vector(self) -> Vector:
        face, u0, u1, v0, v1 = self._uv_bounds()
        s = (_uv_to_st(u0) + _uv_to_st(u1)) / 2
        t = (_uv_to_st(v0) + _uv_to_st(v1)) / 2
        return normalize(_face_uv_to_xyz(face, _st_to_uv(s), _st_to_uv(t)))

    def center(self) -> Point:
        return Point.from_vector(*self.center_vector())

    def bounding_angle(self) -> float:
        """Radius in radians of a cap around the center enclosing the cell"""
        center = self.center_vector()
        return max(angle_between(center, v) for v in self.vertex_vectors())

    def __repr__(self) -> str:
        return f"CellId({self.to_token()!r}, level={self.level})"

    def __str__(self) -> str:
        return self.to_token()


def face_cells() -> Iterator[CellId]:
    for face in range(NUM_FACES):
        yield CellId.from_face(face)
