"""
Purpose: Great-circle distance between two (lat, lon) points.
Default distance source for matching when no road router is injected.
"""

from __future__ import annotations

import math
from typing import Tuple

LatLon = Tuple[float, float]

EARTH_RADIUS_KM = 6371.0


def haversine_km(origin: LatLon, destination: LatLon) -> float:
    """
    Great-circle distance in kilometres between two (lat, lon) points.
    """
    lat1, lon1 = origin
    lat2, lon2 = destination

    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    # Clamp guards against rounding just above 1.0 for antipodal points.
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(max(0.0, 1 - a)))
    return EARTH_RADIUS_KM * c
