"""
CellQuery Core Module

Geometry model, exceptions, and request handlers.
"""

from cellquery.core.exceptions import (
    CellQueryError,
    ValidationError,
    InvalidLevelRange,
    ParameterError,
    DecodeError,
    InvalidToken,
)
from cellquery.core.geometry import Point, Polygon
from cellquery.core.api import (
    Response,
    handle_cover,
    handle_cover_h3,
    handle_check_intersection,
)

__all__ = [
    # Geometry
    "Point",
    "Polygon",
    # Handlers
    "Response",
    "handle_cover",
    "handle_cover_h3",
    "handle_check_intersection",
    # Exceptions
    "CellQueryError",
    "ValidationError",
    "InvalidLevelRange",
    "ParameterError",
    "DecodeError",
    "InvalidToken",
]
