"""
Drivers domain package.

Public API:
- Domain models: Driver, DriverStatus, VehicleClass
- Eligibility: filter_eligible_drivers
- Read port: DriverSource, InMemoryDriverSource, CsvDriverSource
"""
from .models import Driver, DriverStatus, LatLon, VehicleClass
from .selection import filter_eligible_drivers
from .source import CsvDriverSource, DriverSource, InMemoryDriverSource

__all__ = [
    "Driver",
    "DriverStatus",
    "LatLon",
    "VehicleClass",
    "filter_eligible_drivers",
    "DriverSource",
    "InMemoryDriverSource",
    "CsvDriverSource",
]
