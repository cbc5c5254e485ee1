"""
Process-wide coverage settings.

Values are fixed at import time and never mutated while serving requests;
callers needing different values construct their own CoverageConfig.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class CoverageConfig:
    """
    Constants shared by the covering algorithms.

    Attributes:
        earth_radius_km: Planetary radius used to turn meters into angles
        max_cap_cells: Cell budget for circle coverings

    Examples:
        >>> config = CoverageConfig(max_cap_cells=50)
        >>> config.earth_radius_km
        6371.01
    """

    earth_radius_km: float = 6371.01
    max_cap_cells: int = 300

    def radius_to_angle(self, radius_m: float) -> float:
        """Convert a distance in meters to an angle in radians"""
        return (radius_m / 1000) / self.earth_radius_km


DEFAULT_CONFIG = CoverageConfig()
