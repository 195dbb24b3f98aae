"""
Great-circle distance for proximity matching.

Note: This code was generated with assistance from AI coding tools
and has been reviewed and tested by a human.
"""

import math

from ..constants import EARTH_RADIUS_KM
from ..exceptions import InvalidArgumentError


def validate_coordinates(latitude: float, longitude: float) -> None:
    """
    Check a coordinate pair is finite and within range.

    Raises:
        InvalidArgumentError: If latitude is outside [-90, 90] or longitude outside [-180, 180]
    """
    if not (math.isfinite(latitude) and math.isfinite(longitude)):
        raise InvalidArgumentError(f"Coordinates must be finite: ({latitude}, {longitude})")
    if not -90.0 <= latitude <= 90.0:
        raise InvalidArgumentError(f"Latitude {latitude} outside [-90, 90]")
    if not -180.0 <= longitude <= 180.0:
        raise InvalidArgumentError(f"Longitude {longitude} outside [-180, 180]")


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Compute great-circle distance in kilometers between two points.

    Args:
        lat1: Latitude of the first point in decimal degrees
        lon1: Longitude of the first point in decimal degrees
        lat2: Latitude of the second point in decimal degrees
        lon2: Longitude of the second point in decimal degrees

    Returns:
        Distance in kilometers (0.0 for identical points)

    Raises:
        InvalidArgumentError: If either coordinate pair is out of range
    """
    validate_coordinates(lat1, lon1)
    validate_coordinates(lat2, lon2)

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = phi2 - phi1
    dlambda = math.radians(lon2 - lon1)

    h = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # Rounding can push h just past 1 for antipodal points
    h = min(1.0, max(0.0, h))
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(h))
