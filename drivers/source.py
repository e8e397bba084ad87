"""
Purpose: Read port for candidate drivers.
What it does:
Defines the DriverSource interface the dispatcher pulls candidates from, and
two implementations: an in-memory snapshot (tests, real-time feeds) and a CSV
export loader (simulations, offline analysis).
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol, Sequence

import pandas as pd

from .models import Driver, DriverStatus, LatLon, VehicleClass

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["driver_id", "lat", "lon", "rating", "vehicle_class", "total_deliveries", "status"]


class DriverSource(Protocol):
    def fetch_candidate_drivers(self, location: LatLon) -> List[Driver]:
        ...


class InMemoryDriverSource:
    """
    Serves a fixed list of drivers regardless of location.
    """
    def __init__(self, drivers: Sequence[Driver]):
        self._drivers = list(drivers)

    def fetch_candidate_drivers(self, location: LatLon) -> List[Driver]:
        return list(self._drivers)


class CsvDriverSource:
    """
    Loads drivers from a CSV export with columns:
    driver_id, lat, lon, rating, vehicle_class, total_deliveries, status

    Blank lat/lon means unknown location, blank vehicle_class means unknown
    vehicle. Rows with unrecognised values are degraded (offline status /
    unknown vehicle) and logged, never dropped silently.
    """
    def __init__(self, path: str):
        self.path = path
        self._drivers: Optional[List[Driver]] = None

    def fetch_candidate_drivers(self, location: LatLon) -> List[Driver]:
        if self._drivers is None:
            self._drivers = self._load()
        return list(self._drivers)

    def _load(self) -> List[Driver]:
        df = pd.read_csv(self.path, dtype={"driver_id": str, "vehicle_class": str, "status": str})

        missing = [col for col in CSV_COLUMNS if col not in df.columns]
        if missing:
            raise ValueError(f"{self.path} is missing columns: {', '.join(missing)}")

        drivers = []
        for row in df.itertuples(index=False):
            drivers.append(
                Driver.new(
                    driver_id=row.driver_id,
                    lat=None if pd.isna(row.lat) else float(row.lat),
                    lon=None if pd.isna(row.lon) else float(row.lon),
                    rating=0.0 if pd.isna(row.rating) else float(row.rating),
                    vehicle_class=_parse_vehicle(row.vehicle_class, row.driver_id),
                    total_deliveries=0 if pd.isna(row.total_deliveries) else int(row.total_deliveries),
                    status=_parse_status(row.status, row.driver_id),
                )
            )

        logger.info("Loaded %d drivers from %s", len(drivers), self.path)
        return drivers


def _parse_vehicle(raw, driver_id: str) -> Optional[VehicleClass]:
    if pd.isna(raw) or str(raw).strip() == "":
        return None
    try:
        return VehicleClass(str(raw).strip().lower())
    except ValueError:
        logger.warning("Driver %s has unknown vehicle class %r", driver_id, raw)
        return None


def _parse_status(raw, driver_id: str) -> DriverStatus:
    if pd.isna(raw):
        return DriverStatus.OFFLINE
    try:
        return DriverStatus(str(raw).strip().lower())
    except ValueError:
        logger.warning("Driver %s has unknown status %r, treating as offline", driver_id, raw)
        return DriverStatus.OFFLINE
