import math

import pytest

from drivers.models import Driver, DriverStatus, VehicleClass
from orders.models import MatchingCriteria
from routing.geo import EARTH_RADIUS_KM

KM_PER_DEGREE_LAT = EARTH_RADIUS_KM * math.pi / 180


def km_north(origin, km):
    """Point `km` due north of origin; haversine returns exactly this distance."""
    return (origin[0] + km / KM_PER_DEGREE_LAT, origin[1])


@pytest.fixture
def pickup():
    # Johannesburg CBD
    return (-26.2041, 28.0473)


@pytest.fixture
def criteria(pickup):
    return MatchingCriteria(pickup=pickup, required_vehicle=VehicleClass.MEDIUM)


@pytest.fixture
def make_driver(pickup):
    """
    Factory for drivers placed `km` north of the pickup (None = unknown location).
    """
    def _make(
        driver_id,
        km=1.0,
        rating=4.5,
        vehicle_class=VehicleClass.MEDIUM,
        total_deliveries=100,
        status=DriverStatus.AVAILABLE,
    ):
        location = None if km is None else km_north(pickup, km)
        return Driver(
            id=driver_id,
            location=location,
            rating=rating,
            vehicle_class=vehicle_class,
            total_deliveries=total_deliveries,
            status=status,
        )
    return _make
