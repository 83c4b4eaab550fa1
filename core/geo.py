"""Great-circle distance helpers."""

from __future__ import annotations

import math

from core.models import PhotoLocation

EARTH_RADIUS_KM = 6371.0


def haversine_meters(a: PhotoLocation, b: PhotoLocation) -> float:
    """Return the Haversine distance between `a` and `b` in meters."""
    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = math.sin(d_lat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return EARTH_RADIUS_KM * c * 1000
