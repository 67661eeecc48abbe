"""Geo Math: great-circle distance and bounding boxes for proximity queries.

Invariants:
    - Pure functions: no IO
    - Distances in meters; coordinates in degrees (lng, lat order at the API)
    - bounding_box() never excludes a point within radius_m of the center
    - Longitudes returned by bounding_box() stay within -180..180; a box
      crossing the antimeridian comes back with min_lng > max_lng
"""

import math

EARTH_RADIUS_M = 6371000


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Return distance in meters between two lat/lon points."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    dphi = math.radians(lat2 - lat1)
    dlambda = math.radians(lon2 - lon1)
    a = math.sin(dphi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(dlambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def bounding_box(lng: float, lat: float, radius_m: float) -> tuple[float, float, float, float]:
    """(min_lng, min_lat, max_lng, max_lat) enclosing a circle of radius_m.

    Over-approximates; callers still filter by haversine(). When the circle
    reaches a pole the box spans every longitude. When it crosses the
    antimeridian min_lng > max_lng and the box is the union of
    [min_lng, 180] and [-180, max_lng].
    """
    angular = radius_m / EARTH_RADIUS_M
    d_lat = math.degrees(angular)
    min_lat, max_lat = lat - d_lat, lat + d_lat
    cos_lat = math.cos(math.radians(lat))
    ratio = math.sin(angular) / cos_lat if cos_lat > 0 else 2.0
    if max_lat >= 90.0 or min_lat <= -90.0 or ratio >= 1.0:
        return -180.0, max(-90.0, min_lat), 180.0, min(90.0, max_lat)
    d_lng = math.degrees(math.asin(ratio))
    min_lng, max_lng = lng - d_lng, lng + d_lng
    if min_lng < -180.0:
        min_lng += 360.0
    if max_lng > 180.0:
        max_lng -= 360.0
    return min_lng, min_lat, max_lng, max_lat


def crosses_antimeridian(min_lng: float, max_lng: float) -> bool:
    return min_lng > max_lng
