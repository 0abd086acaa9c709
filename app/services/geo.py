"""
Distance helpers for browsing reviews by location.
"""

import math

from app.schemas.location import Coordinates

# Mean Earth radius (IUGG)
EARTH_RADIUS_KM = 6371.0088


def haversine_km(a: Coordinates, b: Coordinates) -> float:
    """Great-circle distance between two points in kilometres."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    d_lat = lat2 - lat1
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    return 2 * EARTH_RADIUS_KM * math.asin(min(1.0, math.sqrt(h)))


def bounding_box(center: Coordinates, radius_km: float) -> tuple[float, float, float, float]:
    """
    Latitude/longitude box that contains every point within radius_km.

    Used as a cheap SQL prefilter before the exact distance check.

    Returns:
        (min_lat, max_lat, min_lon, max_lon)
    """
    d_lat = math.degrees(radius_km / EARTH_RADIUS_KM)
    min_lat = max(center.latitude - d_lat, -90.0)
    max_lat = min(center.latitude + d_lat, 90.0)

    # Near the poles (or for huge radii) every longitude qualifies
    cos_lat = math.cos(math.radians(max(abs(min_lat), abs(max_lat))))
    if cos_lat <= 1e-9:
        return min_lat, max_lat, -180.0, 180.0
    d_lon = math.degrees(radius_km / (EARTH_RADIUS_KM * cos_lat))
    if d_lon >= 180:
        return min_lat, max_lat, -180.0, 180.0

    # Boxes crossing the antimeridian fall back to the full longitude range
    min_lon = center.longitude - d_lon
    max_lon = center.longitude + d_lon
    if min_lon < -180 or max_lon > 180:
        return min_lat, max_lat, -180.0, 180.0
    return min_lat, max_lat, min_lon, max_lon
