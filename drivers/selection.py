"""
Purpose: Hard eligibility rules applied before drivers are ranked.
What it does:
Accepts a pool of drivers and drops the ones that must not be scored at all
(offline or busy), plus the optional caller-requested rating floor.
"""

from typing import Iterable, List, Optional

from .models import Driver


def filter_eligible_drivers(drivers: Iterable[Driver], min_rating: Optional[float] = None) -> List[Driver]:
    """
    Returns only drivers who are online (available for a job) and,
    when a floor is given, rated at least `min_rating`.
    Input order is preserved.
    """
    eligible = []

    for driver in drivers:
        if not driver.is_online:
            continue

        if min_rating is not None and driver.rating < min_rating:
            continue

        eligible.append(driver)

    return eligible
