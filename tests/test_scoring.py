import pytest

from dispatch.policy import MatchingPolicy, ScoreWeights, default_matching_policy
from dispatch.scoring import (
    distance_score,
    estimate_cost,
    experience_score,
    score_driver,
    vehicle_match_score,
)
from drivers.models import DriverStatus, VehicleClass
from orders.models import MatchingCriteria, Urgency


@pytest.fixture
def policy():
    return default_matching_policy()


def test_distance_score_is_linear_between_pickup_and_radius():
    """
    The distance curve is a straight line from 1.0 at 0 km to 0.0 at the radius.
    """
    assert distance_score(0.0, 20.0) == 1.0
    assert distance_score(5.0, 20.0) == pytest.approx(0.75)
    assert distance_score(10.0, 20.0) == pytest.approx(0.5)
    assert distance_score(20.0, 20.0) == 0.0

    # Beyond the radius it stays clamped at zero
    assert distance_score(35.0, 20.0) == 0.0


def test_distance_score_unknown_is_worst_case():
    assert distance_score(None, 20.0) == 0.0


def test_distance_score_never_decreases_as_driver_gets_closer():
    previous = -1.0
    for tenth_km in range(300, -1, -1):
        current = distance_score(tenth_km / 10, 20.0)
        assert current >= previous
        previous = current


def test_vehicle_match_uses_capacity_ordering(policy):
    """
    A larger vehicle satisfies a smaller request, never the reverse.
    """
    assert vehicle_match_score(VehicleClass.LARGE, VehicleClass.MEDIUM, policy) == 1.0
    assert vehicle_match_score(VehicleClass.MEDIUM, VehicleClass.MEDIUM, policy) == 1.0
    assert vehicle_match_score(VehicleClass.SMALL, VehicleClass.MEDIUM, policy) == policy.vehicle_mismatch_score
    assert vehicle_match_score(VehicleClass.MEDIUM, VehicleClass.LARGE, policy) == policy.vehicle_mismatch_score
    assert vehicle_match_score(None, VehicleClass.SMALL, policy) == policy.unknown_vehicle_score

    # Mismatch is down-ranked but still above an unknown vehicle
    assert 0.0 < policy.vehicle_mismatch_score <= 0.3
    assert policy.unknown_vehicle_score == 0.0


def test_experience_score_saturates(policy):
    assert experience_score(5.0, policy.deliveries_saturation - 1, policy) == pytest.approx(1.0)
    assert experience_score(5.0, 10_000, policy) == pytest.approx(1.0)
    assert experience_score(0.0, 0, policy) == 0.0


def test_experience_score_is_monotonic(policy):
    by_deliveries = [experience_score(4.0, n, policy) for n in (0, 1, 10, 100, 499, 500, 5000)]
    assert by_deliveries == sorted(by_deliveries)

    by_rating = [experience_score(r, 50, policy) for r in (0.0, 1.0, 2.5, 4.0, 5.0)]
    assert by_rating == sorted(by_rating)


def test_experience_score_clamps_out_of_range_inputs(policy):
    assert experience_score(9.0, 100, policy) <= 1.0
    assert experience_score(-2.0, -50, policy) == 0.0


def test_score_driver_default_weights(make_driver, criteria, policy):
    """
    Medium urgency uses the 40/30/30 split.
    """
    driver = make_driver("d1", km=5.0, rating=5.0, vehicle_class=VehicleClass.MEDIUM, total_deliveries=499)

    result = score_driver(driver, criteria, policy)

    assert result.driver_id == "d1"
    assert result.factors.distance == pytest.approx(0.75)
    assert result.factors.vehicle_match == 1.0
    assert result.factors.experience == pytest.approx(1.0)
    assert result.score == pytest.approx(0.4 * 0.75 + 0.3 * 1.0 + 0.3 * 1.0)
    assert result.distance_km == pytest.approx(5.0)


def test_score_driver_unknown_location_degrades(make_driver, criteria, policy):
    driver = make_driver("ghost", km=None)

    result = score_driver(driver, criteria, policy)

    assert result.factors.distance == 0.0
    assert result.distance_km is None
    assert result.estimated_arrival_minutes is None
    assert result.estimated_cost is None


def test_unknown_location_no_better_than_driver_at_max_radius(make_driver, criteria, policy):
    at_edge = score_driver(make_driver("edge", km=policy.max_radius_km), criteria, policy)
    unknown = score_driver(make_driver("ghost", km=None), criteria, policy)

    assert unknown.score <= at_edge.score
    assert unknown.factors.distance <= at_edge.factors.distance


def test_request_radius_overrides_policy_radius(make_driver, pickup, policy):
    criteria = MatchingCriteria(pickup=pickup, required_vehicle=VehicleClass.MEDIUM, max_distance_km=10.0)

    result = score_driver(make_driver("d1", km=5.0), criteria, policy)

    assert result.factors.distance == pytest.approx(0.5)


def test_zero_request_radius_is_honoured(make_driver, pickup, policy):
    """
    A request radius of 0 km is a real radius, not a missing one.
    """
    criteria = MatchingCriteria(pickup=pickup, required_vehicle=VehicleClass.MEDIUM, max_distance_km=0.0)

    result = score_driver(make_driver("d1", km=1.0), criteria, policy)

    assert result.factors.distance == 0.0


def test_score_driver_ignores_status(make_driver, criteria, policy):
    """
    Status filtering belongs to ranking; scoring an offline driver still works.
    """
    online = score_driver(make_driver("on", status=DriverStatus.AVAILABLE), criteria, policy)
    offline = score_driver(make_driver("off", status=DriverStatus.OFFLINE), criteria, policy)

    assert online.score == offline.score


def test_urgency_shifts_weight_towards_distance(make_driver, pickup, policy):
    """
    A nearby newcomer beats a distant veteran on urgent jobs and loses on relaxed ones.
    """
    nearby = make_driver("nearby", km=1.0, rating=3.0, total_deliveries=0)
    veteran = make_driver("veteran", km=12.0, rating=5.0, total_deliveries=500)

    urgent = MatchingCriteria(pickup=pickup, required_vehicle=VehicleClass.MEDIUM, urgency=Urgency.HIGH)
    relaxed = MatchingCriteria(pickup=pickup, required_vehicle=VehicleClass.MEDIUM, urgency=Urgency.LOW)

    assert score_driver(nearby, urgent, policy).score > score_driver(veteran, urgent, policy).score
    assert score_driver(nearby, relaxed, policy).score < score_driver(veteran, relaxed, policy).score


def test_arrival_estimate(make_driver, criteria, policy):
    # 10 km at 40 km/h slowed by 1.2 traffic factor -> 18 minutes
    assert score_driver(make_driver("d1", km=10.0), criteria, policy).estimated_arrival_minutes == 18

    # Almost on top of the pickup still reports at least a minute
    assert score_driver(make_driver("d2", km=0.05), criteria, policy).estimated_arrival_minutes == 1

    assert score_driver(make_driver("d3", km=0.0), criteria, policy).estimated_arrival_minutes == 0


def test_cost_estimate_uses_rate_tables(pickup, policy):
    small_low = MatchingCriteria(pickup=pickup, required_vehicle=VehicleClass.SMALL, urgency=Urgency.LOW)
    medium_medium = MatchingCriteria(pickup=pickup, required_vehicle=VehicleClass.MEDIUM, urgency=Urgency.MEDIUM)
    large_high = MatchingCriteria(pickup=pickup, required_vehicle=VehicleClass.LARGE, urgency=Urgency.HIGH)

    # base 50 + 10 km * 8
    assert estimate_cost(10.0, small_low, policy) == 130.0
    # 130 * 1.3 * 1.2 = 202.8, rounded up
    assert estimate_cost(10.0, medium_medium, policy) == 203.0
    # 130 * 1.6 * 1.5 = 312
    assert estimate_cost(10.0, large_high, policy) == 312.0

    assert estimate_cost(None, small_low, policy) is None


def test_custom_policy_weights_are_honoured(make_driver, criteria):
    distance_only = MatchingPolicy(urgency_weights={
        Urgency.LOW: ScoreWeights(1.0, 0.0, 0.0),
        Urgency.MEDIUM: ScoreWeights(1.0, 0.0, 0.0),
        Urgency.HIGH: ScoreWeights(1.0, 0.0, 0.0),
    })
    distance_only.validate()

    result = score_driver(make_driver("d1", km=15.0, vehicle_class=None), criteria, distance_only)

    assert result.score == pytest.approx(0.25)


def test_custom_distance_provider(make_driver, criteria, policy):
    """
    A road router can replace great-circle distance behind the same contract.
    """
    calls = []

    def road_distance(origin, destination):
        calls.append((origin, destination))
        return 4.0

    result = score_driver(make_driver("d1", km=1.0), criteria, policy, distance_provider=road_distance)

    assert result.distance_km == 4.0
    assert result.factors.distance == pytest.approx(0.8)
    assert calls and calls[0][1] == criteria.pickup


def test_unroutable_distance_is_worst_case(make_driver, criteria, policy):
    result = score_driver(make_driver("d1", km=1.0), criteria, policy, distance_provider=lambda a, b: None)

    assert result.factors.distance == 0.0
    assert result.estimated_cost is None
