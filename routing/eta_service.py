#Purpose: ETA estimation policy.
#Converts a driver -> pickup distance into the "arrives in X minutes"
#figure shown next to each matched driver.
#Speed and traffic assumptions come from the MatchingPolicy so they can be
#tuned without touching this code.

from __future__ import annotations

from typing import Optional


def estimate_arrival_minutes(
        distance_km: Optional[float],
        *,
        average_speed_kmh: float,
        traffic_factor: float = 1.0,
        min_minutes: int = 1,
) -> Optional[int]:
    """
    Minutes for a driver to cover `distance_km` at urban speed.

    Returns None when the distance is unknown, 0 when the driver is already
    at the pickup, and never less than `min_minutes` otherwise.
    """
    if distance_km is None:
        return None
    if distance_km <= 0:
        return 0

    effective_speed = average_speed_kmh / traffic_factor
    minutes = round(distance_km / effective_speed * 60)
    return max(min_minutes, int(minutes))
