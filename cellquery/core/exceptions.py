"""
CellQuery Exceptions

Exception hierarchy for error handling.
"""


class CellQueryError(Exception):
    """Base exception for CellQuery"""

    pass


class ValidationError(CellQueryError):
    """Geometry or parameter value validation failed"""

    pass


class InvalidLevelRange(ValidationError):
    """Level outside the index range, or max_level < min_level"""

    pass


class ParameterError(CellQueryError):
    """Request parameter missing or not numeric"""

    pass


class DecodeError(CellQueryError):
    """GeoJSON payload could not be decoded"""

    pass


class InvalidToken(CellQueryError):
    """Cell token is malformed"""

    pass
