"""
Geographic helpers: great-circle distance and coarse geo-bucket topics.
"""

import math
from typing import Optional

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Calculate distance between two points in kilometers using the Haversine formula."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    # Rounding can push a just outside [0, 1] for antipodal points
    a = min(1.0, max(0.0, a))
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_KM * c


def geo_bucket_topic(latitude: float, longitude: float) -> str:
    """
    Topic name for the ~1 km grid cell containing a point.

    Used to approximate "users near this location" without a geo index.
    """
    return f"location_{math.floor(latitude * 100)}_{math.floor(longitude * 100)}"


def coordinates_of(location: Optional[dict]) -> Optional[tuple]:
    """Return (lat, lon) from a location mapping, or None if either axis is not numeric."""
    if not isinstance(location, dict):
        return None
    latitude = location.get("latitude")
    longitude = location.get("longitude")
    if not is_number(latitude) or not is_number(longitude):
        return None
    return float(latitude), float(longitude)


def is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and not math.isnan(value)
