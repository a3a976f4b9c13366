from math import atan2, cos, radians, sin, sqrt

from skillbridge.config import EARTH_RADIUS_MILES
from skillbridge.models import Coordinates


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Great-circle distance between two points using the Haversine formula.

    NaN coordinates propagate as NaN; callers guard upstream.

    Args:
        lat1 (float): Latitude of the first point, in degrees.
        lon1 (float): Longitude of the first point, in degrees.
        lat2 (float): Latitude of the second point, in degrees.
        lon2 (float): Longitude of the second point, in degrees.

    Returns:
        float: Distance in miles.
    """
    d_lat = radians(lat2 - lat1)
    d_lon = radians(lon2 - lon1)
    a = (
        sin(d_lat / 2) ** 2
        + cos(radians(lat1)) * cos(radians(lat2)) * sin(d_lon / 2) ** 2
    )
    c = 2 * atan2(sqrt(a), sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def distance_between(a: Coordinates, b: Coordinates) -> float:
    """Haversine distance in miles between two Coordinates."""
    return haversine_miles(a.lat, a.lng, b.lat, b.lng)
