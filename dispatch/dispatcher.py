"""
Purpose: Orchestrator around the pure matching engine (the "glue").
What it does:
Pulls fresh candidate drivers from the data layer (read port), runs the
matching engine, hands an auto-assigned pick to the caller's assignment
writer, and re-runs matching whenever a new driver list is pushed in
(push port) so subscribers always see an up-to-date ranking.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from drivers.models import Driver
from drivers.source import DriverSource
from orders.models import MatchingCriteria
from routing.matrix_adapter import DistanceProvider

from .policy import MatchingPolicy, default_matching_policy
from .scoring import DriverScore, auto_assign_driver, find_best_matches

logger = logging.getLogger(__name__)

AssignmentWriter = Callable[[str, DriverScore], None]
MatchesHandler = Callable[[MatchingCriteria, List[DriverScore]], None]


class MatchingDispatcher:
    """
    Coordinates one matching call per delivery request.
    Owns no driver state: every call works on a fresh candidate list.
    """
    def __init__(
        self,
        driver_source: DriverSource,
        assignment_writer: Optional[AssignmentWriter] = None,
        policy: Optional[MatchingPolicy] = None,
        distance_provider: Optional[DistanceProvider] = None,
    ):
        self.driver_source = driver_source
        self.assignment_writer = assignment_writer
        self.policy = policy or default_matching_policy()
        self.distance_provider = distance_provider
        self._handlers: List[MatchesHandler] = []

    def match(self, criteria: MatchingCriteria, limit: Optional[int] = None) -> List[DriverScore]:
        """
        Ranked list for manual pick.
        """
        drivers = self.driver_source.fetch_candidate_drivers(criteria.pickup)
        return find_best_matches(drivers, criteria, limit, self.policy, self.distance_provider)

    def auto_assign(self, delivery_id: str, criteria: MatchingCriteria) -> Optional[DriverScore]:
        """
        Picks the single best driver and passes it to the assignment writer.
        Returns None (and writes nothing) when nobody qualifies.
        """
        drivers = self.driver_source.fetch_candidate_drivers(criteria.pickup)
        best = auto_assign_driver(drivers, criteria, self.policy, self.distance_provider)

        if best is None:
            logger.info("No driver available for delivery %s", delivery_id)
            return None

        logger.info(
            "Delivery %s auto-assigned to driver %s (score %.3f, eta %s min)",
            delivery_id, best.driver_id, best.score, best.estimated_arrival_minutes,
        )
        if self.assignment_writer:
            self.assignment_writer(delivery_id, best)
        return best

    def on_driver_list_changed(self, handler: MatchesHandler) -> Callable[[], None]:
        """
        Subscribe to re-ranked results. Returns a callable that unsubscribes.
        """
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    def publish_driver_list(
        self,
        drivers: Sequence[Driver],
        criteria: MatchingCriteria,
        limit: Optional[int] = None,
    ) -> List[DriverScore]:
        """
        Called by the real-time feed when driver locations or availability
        change. Re-runs matching over `drivers` and notifies every subscriber.
        """
        matches = find_best_matches(drivers, criteria, limit, self.policy, self.distance_provider)

        for handler in list(self._handlers):
            try:
                handler(criteria, matches)
            except Exception:
                # One broken subscriber must not starve the others.
                logger.exception("Driver list handler %r failed", handler)

        return matches
