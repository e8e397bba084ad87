"""
Purpose: Domain models for delivery requests.
What it does:
- Defines the pending DeliveryRequest as created by a customer
- Defines MatchingCriteria, the value the matching engine consumes

Defines enums/constants:
- Urgency = low | medium | high
- ItemSize = small | medium | large

Rule: No distance math, no scoring logic. Models only.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from drivers.models import LatLon, VehicleClass


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ItemSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


# Smallest vehicle class able to carry an item of each size.
ITEM_SIZE_VEHICLE = {
    ItemSize.SMALL: VehicleClass.SMALL,
    ItemSize.MEDIUM: VehicleClass.MEDIUM,
    ItemSize.LARGE: VehicleClass.LARGE,
}


@dataclass(frozen=True)
class MatchingCriteria:
    """
    Everything the matching engine needs to know about one delivery request.
    """
    pickup: LatLon
    required_vehicle: VehicleClass = VehicleClass.SMALL
    urgency: Urgency = Urgency.MEDIUM

    # Optional hard filters, applied before ranking.
    max_distance_km: Optional[float] = None
    min_rating: Optional[float] = None


@dataclass(frozen=True)
class DeliveryRequest:
    """
    A pending delivery as submitted by a customer.
    """
    id: str
    customer_id: str
    pickup: LatLon
    dropoff: LatLon
    item_size: ItemSize = ItemSize.SMALL
    urgency: Urgency = Urgency.MEDIUM
    item_description: str = ""
    search_radius_km: Optional[float] = None

    def to_criteria(self, min_rating: Optional[float] = None) -> MatchingCriteria:
        return MatchingCriteria(
            pickup=self.pickup,
            required_vehicle=ITEM_SIZE_VEHICLE[self.item_size],
            urgency=self.urgency,
            max_distance_km=self.search_radius_km,
            min_rating=min_rating,
        )
