"""
Purpose: Core data models for the drivers domain.
What it does:
Defines the structure of a candidate Driver, their status and vehicle class
as they are handed to the matching engine by the data layer.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

LatLon = Tuple[float, float]


class DriverStatus(str, Enum):
    """
    Standardizes the state a driver can be in.
    """
    AVAILABLE = "available"
    BUSY = "busy"
    OFFLINE = "offline"


class VehicleClass(str, Enum):
    """
    Load category of a vehicle. Ordered by capacity: a larger class
    can carry anything a smaller one can.
    """
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"

    @property
    def rank(self) -> int:
        return _VEHICLE_RANK[self]

    def satisfies(self, required: VehicleClass) -> bool:
        return self.rank >= required.rank


_VEHICLE_RANK = {
    VehicleClass.SMALL: 0,
    VehicleClass.MEDIUM: 1,
    VehicleClass.LARGE: 2,
}


@dataclass(frozen=True)
class Driver:
    """
    A purely stateless snapshot of a candidate driver at a specific point in time.
    """
    id: str
    location: Optional[LatLon]
    rating: float
    vehicle_class: Optional[VehicleClass]
    total_deliveries: int = 0
    status: DriverStatus = DriverStatus.AVAILABLE

    @property
    def is_online(self) -> bool:
        # Busy drivers are signed in but cannot take a job, so they do not count.
        return self.status == DriverStatus.AVAILABLE

    @classmethod
    def new(
        cls,
        driver_id: str,
        lat: Optional[float],
        lon: Optional[float],
        rating: float = 0.0,
        vehicle_class: str | VehicleClass | None = None,
        total_deliveries: int = 0,
        status: str | DriverStatus = DriverStatus.AVAILABLE,
    ) -> Driver:
        if isinstance(status, str) and not isinstance(status, DriverStatus):
            status = DriverStatus(status)

        if isinstance(vehicle_class, str) and not isinstance(vehicle_class, VehicleClass):
            vehicle_class = VehicleClass(vehicle_class)

        # Half a coordinate is as good as none.
        location = (lat, lon) if lat is not None and lon is not None else None

        return cls(
            id=driver_id,
            location=location,
            rating=rating,
            vehicle_class=vehicle_class,
            total_deliveries=total_deliveries,
            status=status,
        )
