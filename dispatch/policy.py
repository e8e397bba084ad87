"""
Purpose: Central configuration for driver matching (single source of truth).
What it does:

Stores all tunable weights, curves and rate tables:

MAX_RADIUS_KM = 20
WEIGHTS (medium urgency) = distance 0.40 / vehicle 0.30 / experience 0.30
AVERAGE_SPEED_KMH = 40, TRAFFIC_FACTOR = 1.2
BASE_FEE = 50, PER_KM_RATE = 8

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Dict, Optional

from dotenv import load_dotenv

from drivers.models import VehicleClass
from orders.models import Urgency


@dataclass(frozen=True)
class ScoreWeights:
    """
    Weights of the three sub-scores in the composite. Must sum to 1.
    """
    distance: float
    vehicle_match: float
    experience: float

    @property
    def total(self) -> float:
        return self.distance + self.vehicle_match + self.experience


def _default_urgency_weights() -> Dict[Urgency, ScoreWeights]:
    # Urgent requests lean on proximity, relaxed ones on track record.
    return {
        Urgency.LOW: ScoreWeights(distance=0.30, vehicle_match=0.30, experience=0.40),
        Urgency.MEDIUM: ScoreWeights(distance=0.40, vehicle_match=0.30, experience=0.30),
        Urgency.HIGH: ScoreWeights(distance=0.55, vehicle_match=0.25, experience=0.20),
    }


@dataclass(frozen=True)
class MatchingPolicy:
    """
    Central configuration for the driver matching engine.

    Keep all scoring thresholds here so behavior can be tuned without
    touching the scoring logic.

    Notes:
    - distance sub-score falls off linearly: 1.0 at the pickup, 0.0 at
      max_radius_km (or the request's own radius when it sets one).
    - experience blends normalized rating with a log-scaled delivery count
      that saturates at deliveries_saturation.
    """

    # --- Distance curve ---
    max_radius_km: float = 20.0

    # --- Composite weights per urgency level ---
    urgency_weights: Dict[Urgency, ScoreWeights] = field(default_factory=_default_urgency_weights)

    # --- Vehicle compatibility ---
    # Known vehicle that is too small for the load: down-ranked, not filtered.
    vehicle_mismatch_score: float = 0.2
    # Vehicle class not reported at all.
    unknown_vehicle_score: float = 0.0

    # --- Experience blend ---
    rating_weight: float = 0.6
    deliveries_weight: float = 0.4
    max_rating: float = 5.0
    deliveries_saturation: int = 500

    # --- Arrival estimate ---
    average_speed_kmh: float = 40.0
    traffic_factor: float = 1.2
    min_arrival_minutes: int = 1

    # --- Cost estimate (ZAR) ---
    base_fee: float = 50.0
    per_km_rate: float = 8.0
    vehicle_rate_multipliers: Dict[VehicleClass, float] = field(default_factory=lambda: {
        VehicleClass.SMALL: 1.0,
        VehicleClass.MEDIUM: 1.3,
        VehicleClass.LARGE: 1.6,
    })
    urgency_rate_multipliers: Dict[Urgency, float] = field(default_factory=lambda: {
        Urgency.LOW: 1.0,
        Urgency.MEDIUM: 1.2,
        Urgency.HIGH: 1.5,
    })

    # --- Ranking ---
    default_limit: int = 5

    def weights_for(self, urgency: Urgency) -> ScoreWeights:
        return self.urgency_weights.get(urgency, self.urgency_weights[Urgency.MEDIUM])

    def validate(self) -> None:
        """
        Basic sanity checks. Call once at startup.
        """
        if self.max_radius_km <= 0:
            raise ValueError("max_radius_km must be > 0")

        if Urgency.MEDIUM not in self.urgency_weights:
            raise ValueError("urgency_weights must define the medium urgency level")

        for urgency, weights in self.urgency_weights.items():
            if min(weights.distance, weights.vehicle_match, weights.experience) < 0:
                raise ValueError(f"weights for {urgency.value} urgency must be >= 0")
            if abs(weights.total - 1.0) > 1e-9:
                raise ValueError(f"weights for {urgency.value} urgency must sum to 1.0")

        for name in ("vehicle_mismatch_score", "unknown_vehicle_score"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1]")

        if abs(self.rating_weight + self.deliveries_weight - 1.0) > 1e-9:
            raise ValueError("rating_weight and deliveries_weight must sum to 1.0")

        if self.max_rating <= 0:
            raise ValueError("max_rating must be > 0")

        if self.deliveries_saturation < 2:
            raise ValueError("deliveries_saturation must be >= 2")

        if self.average_speed_kmh <= 0 or self.traffic_factor <= 0:
            raise ValueError("average_speed_kmh and traffic_factor must be > 0")

        if self.min_arrival_minutes < 0:
            raise ValueError("min_arrival_minutes must be >= 0")

        if self.base_fee < 0 or self.per_km_rate < 0:
            raise ValueError("base_fee and per_km_rate must be >= 0")

        if set(self.vehicle_rate_multipliers) != set(VehicleClass):
            raise ValueError("vehicle_rate_multipliers must cover every vehicle class")

        if set(self.urgency_rate_multipliers) != set(Urgency):
            raise ValueError("urgency_rate_multipliers must cover every urgency level")

        if self.default_limit < 1:
            raise ValueError("default_limit must be >= 1")


def default_matching_policy() -> MatchingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = MatchingPolicy()
    p.validate()
    return p


def _env_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str) -> Optional[int]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be a whole number, got {raw!r}") from None


def policy_from_env() -> MatchingPolicy:
    """
    Build a policy from environment variables (a .env file is honoured).

    Example in .env:
    MATCHING_MAX_RADIUS_KM=15
    MATCHING_PER_KM_RATE=9.5
    """
    load_dotenv()

    overrides = {}
    for env_name, field_name in (
        ("MATCHING_MAX_RADIUS_KM", "max_radius_km"),
        ("MATCHING_AVERAGE_SPEED_KMH", "average_speed_kmh"),
        ("MATCHING_BASE_FEE", "base_fee"),
        ("MATCHING_PER_KM_RATE", "per_km_rate"),
    ):
        value = _env_float(env_name)
        if value is not None:
            overrides[field_name] = value

    limit = _env_int("MATCHING_DEFAULT_LIMIT")
    if limit is not None:
        overrides["default_limit"] = limit

    p = MatchingPolicy(**overrides)
    p.validate()
    return p
