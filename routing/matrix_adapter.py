from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .osrm_client import OSRMClient, OSRMError

logger = logging.getLogger(__name__)

LatLon = Tuple[float, float]

# (origin, destination) -> kilometres, or None when no distance is known.
DistanceProvider = Callable[[LatLon, LatLon], Optional[float]]


class PreloadingDistanceProvider:
    """
    Adapts routing.osrm_client.OSRMClient into a road-distance provider for
    the matching engine, with caching and bulk prefetching.

    OSRM failures never propagate: the pair is reported as unknown (None)
    and the driver is scored worst-case on distance.
    """
    def __init__(self, osrm_client: OSRMClient):
        self.osrm_client = osrm_client
        self._cache: Dict[Tuple[float, float, float, float], Optional[float]] = {}

    def prefetch(self, pickup: LatLon, locations: Sequence[LatLon]) -> None:
        """
        Fetches every location -> pickup distance with a single /table call
        so subsequent `__call__` lookups are served from memory.
        """
        origins = [loc for loc in dict.fromkeys(locations)
                   if self._key(loc, pickup) not in self._cache]
        if not origins:
            return

        try:
            table = self.osrm_client.compute_table(origins, [pickup])
        except OSRMError as e:
            logger.warning("OSRM prefetch failed for %d locations: %s", len(origins), e)
            return

        distances = table.get("distances", [])
        for row_idx, origin in enumerate(origins):
            if row_idx >= len(distances) or not distances[row_idx]:
                break
            meters = distances[row_idx][0]
            self._cache[self._key(origin, pickup)] = None if meters is None else float(meters) / 1000.0

    def __call__(self, origin: LatLon, destination: LatLon) -> Optional[float]:
        key = self._key(origin, destination)
        if key in self._cache:
            return self._cache[key]

        # Fallback: not prefetched, ask for just this pair.
        try:
            route = self.osrm_client.compute_route([origin, destination])
        except OSRMError as e:
            logger.warning("OSRM route %s -> %s failed: %s", origin, destination, e)
            return None

        km = float(route["distance"]) / 1000.0
        self._cache[key] = km
        return km

    @staticmethod
    def _key(origin: LatLon, destination: LatLon) -> Tuple[float, float, float, float]:
        return (origin[0], origin[1], destination[0], destination[1])


def prefetch_distances(provider: object, pickup: LatLon, locations: List[LatLon]) -> None:
    """
    Calls `provider.prefetch` when the provider supports bulk loading.
    Plain callables (e.g. haversine) are left alone.
    """
    if locations and hasattr(provider, "prefetch"):
        provider.prefetch(pickup, locations)
