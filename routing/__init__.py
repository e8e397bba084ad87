#Marks routing as a package.
#Re-exports the public APIs (haversine_km, estimate_arrival_minutes,
#OSRMClient, PreloadingDistanceProvider) so other modules import from
#routing without knowing internal file names.
#No business logic.

from .geo import haversine_km
from .eta_service import estimate_arrival_minutes
from .osrm_client import OSRMClient, OSRMError
from .matrix_adapter import DistanceProvider, PreloadingDistanceProvider

__all__ = [
    "haversine_km",
    "estimate_arrival_minutes",
    "OSRMClient",
    "OSRMError",
    "DistanceProvider",
    "PreloadingDistanceProvider",
]
