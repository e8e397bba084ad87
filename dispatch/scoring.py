"""
Purpose: Ranking/selection model (the "who is best" layer).
What it does:

Computes for each candidate driver:

distance     = max(0, 1 - d / R)                      (linear falloff, R = radius)
vehicle      = 1.0 if vehicle class covers the load, else a low fixed score
experience   = w_r * rating / 5 + w_d * log(n + 1) / log(saturation)

composite    = weights[urgency] · (distance, vehicle, experience)

plus an arrival estimate and a deterministic cost quote.

Ranks by composite desc, then rating desc, then fewer deliveries, then id,
so identical inputs always produce the identical order.

Rule: Scoring is pure. It never raises for well-typed input and never
mutates driver or delivery state; committing an assignment is the caller's job.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, List, Optional

from drivers.models import Driver, VehicleClass
from drivers.selection import filter_eligible_drivers
from orders.models import MatchingCriteria
from routing.eta_service import estimate_arrival_minutes
from routing.geo import haversine_km
from routing.matrix_adapter import DistanceProvider, prefetch_distances

from .policy import MatchingPolicy, default_matching_policy

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoreFactors:
    """
    Per-dimension sub-scores, each in [0, 1]. Kept for explainability:
    the composite alone cannot be split back into these.
    """
    distance: float
    vehicle_match: float
    experience: float


@dataclass(frozen=True)
class DriverScore:
    """
    Result of scoring one driver against one request.
    """
    driver_id: str
    score: float
    factors: ScoreFactors
    distance_km: Optional[float]
    estimated_arrival_minutes: Optional[int]
    estimated_cost: Optional[float]

    # Copied from the driver so ranking can be reproduced from scores alone.
    rating: float = 0.0
    total_deliveries: int = 0


# -------------------------
# Sub-scores
# -------------------------

def _clamp(value: float, low: float = 0.0, high: float = 1.0) -> float:
    return max(low, min(high, value))


def distance_score(distance_km: Optional[float], radius_km: float) -> float:
    """
    Linear falloff: 1.0 at the pickup, 0.0 at `radius_km` and beyond.
    Unknown distance scores 0.0, the same as a driver at the radius edge.
    """
    if distance_km is None or radius_km <= 0:
        return 0.0
    return _clamp(1.0 - distance_km / radius_km)


def vehicle_match_score(
    vehicle_class: Optional[VehicleClass],
    required: VehicleClass,
    policy: MatchingPolicy,
) -> float:
    if vehicle_class is None:
        return policy.unknown_vehicle_score
    if vehicle_class.satisfies(required):
        return 1.0
    return policy.vehicle_mismatch_score


def experience_score(rating: float, total_deliveries: int, policy: MatchingPolicy) -> float:
    rating_part = _clamp(rating / policy.max_rating)
    deliveries = max(0, total_deliveries)
    deliveries_part = min(1.0, math.log(deliveries + 1) / math.log(policy.deliveries_saturation))
    return _clamp(policy.rating_weight * rating_part + policy.deliveries_weight * deliveries_part)


def estimate_cost(distance_km: Optional[float], criteria: MatchingCriteria, policy: MatchingPolicy) -> Optional[float]:
    """
    Quote in whole currency units: (base + km * rate) * vehicle * urgency multipliers.
    """
    if distance_km is None:
        return None
    vehicle_multiplier = policy.vehicle_rate_multipliers[criteria.required_vehicle]
    urgency_multiplier = policy.urgency_rate_multipliers[criteria.urgency]
    raw = (policy.base_fee + distance_km * policy.per_km_rate) * vehicle_multiplier * urgency_multiplier
    # round() first so float noise like 60.00000000001 does not ceil up a unit
    return float(math.ceil(round(raw, 6)))


# -------------------------
# Engine operations
# -------------------------

def score_driver(
    driver: Driver,
    criteria: MatchingCriteria,
    policy: Optional[MatchingPolicy] = None,
    distance_provider: Optional[DistanceProvider] = None,
) -> DriverScore:
    """
    Score a single driver for a request. Does not look at online status;
    filtering happens in `find_best_matches`.
    """
    policy = policy or default_matching_policy()
    distance_provider = distance_provider or haversine_km

    distance_km: Optional[float] = None
    if driver.location is not None:
        distance_km = distance_provider(driver.location, criteria.pickup)

    radius_km = criteria.max_distance_km if criteria.max_distance_km is not None else policy.max_radius_km

    factors = ScoreFactors(
        distance=distance_score(distance_km, radius_km),
        vehicle_match=vehicle_match_score(driver.vehicle_class, criteria.required_vehicle, policy),
        experience=experience_score(driver.rating, driver.total_deliveries, policy),
    )

    weights = policy.weights_for(criteria.urgency)
    composite = _clamp(
        weights.distance * factors.distance
        + weights.vehicle_match * factors.vehicle_match
        + weights.experience * factors.experience
    )

    return DriverScore(
        driver_id=driver.id,
        score=composite,
        factors=factors,
        distance_km=distance_km,
        estimated_arrival_minutes=estimate_arrival_minutes(
            distance_km,
            average_speed_kmh=policy.average_speed_kmh,
            traffic_factor=policy.traffic_factor,
            min_minutes=policy.min_arrival_minutes,
        ),
        estimated_cost=estimate_cost(distance_km, criteria, policy),
        rating=driver.rating,
        total_deliveries=driver.total_deliveries,
    )


def ranking_key(score: DriverScore):
    # Ties: higher rating, then fewer deliveries (fresher drivers), then id.
    return (-score.score, -score.rating, score.total_deliveries, score.driver_id)


def find_best_matches(
    drivers: Iterable[Driver],
    criteria: MatchingCriteria,
    limit: Optional[int] = None,
    policy: Optional[MatchingPolicy] = None,
    distance_provider: Optional[DistanceProvider] = None,
) -> List[DriverScore]:
    """
    Rank online, available drivers for a request and return the top `limit`.

    - Offline and busy drivers are excluded, never scored.
    - `criteria.min_rating` excludes drivers below the floor.
    - `criteria.max_distance_km` excludes drivers whose known distance is
      beyond it; drivers without a location stay in at the worst distance score.
    - `limit` below 1 is treated as 1. No candidates gives [].
    """
    policy = policy or default_matching_policy()
    distance_provider = distance_provider or haversine_km
    limit = policy.default_limit if limit is None else max(1, limit)

    candidates = filter_eligible_drivers(drivers, min_rating=criteria.min_rating)
    if not candidates:
        logger.debug("No eligible drivers for pickup %s", criteria.pickup)
        return []

    prefetch_distances(
        distance_provider,
        criteria.pickup,
        [d.location for d in candidates if d.location is not None],
    )

    scores = [score_driver(d, criteria, policy, distance_provider) for d in candidates]

    if criteria.max_distance_km is not None:
        scores = [
            s for s in scores
            if s.distance_km is None or s.distance_km <= criteria.max_distance_km
        ]

    scores.sort(key=ranking_key)

    logger.debug(
        "Scored %d of %d eligible drivers for pickup %s, returning top %d",
        len(scores), len(candidates), criteria.pickup, min(limit, len(scores)),
    )
    return scores[:limit]


def auto_assign_driver(
    drivers: Iterable[Driver],
    criteria: MatchingCriteria,
    policy: Optional[MatchingPolicy] = None,
    distance_provider: Optional[DistanceProvider] = None,
) -> Optional[DriverScore]:
    """
    Single best driver for the request, or None when nobody qualifies.
    The caller performs the actual assignment write.
    """
    matches = find_best_matches(drivers, criteria, 1, policy, distance_provider)
    return matches[0] if matches else None
