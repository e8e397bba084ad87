import argparse
import logging
import os

from dispatch.dispatcher import MatchingDispatcher
from dispatch.policy import policy_from_env
from drivers.source import CsvDriverSource
from orders.models import DeliveryRequest, ItemSize, Urgency
from routing.matrix_adapter import PreloadingDistanceProvider
from routing.osrm_client import OSRMClient


class PrintingAssignmentWriter:
    """Stands in for the database write that commits an assignment."""
    def __init__(self):
        self.assignments = {}

    def __call__(self, delivery_id, driver_score):
        self.assignments[delivery_id] = driver_score.driver_id
        print(f"[ASSIGNED] Delivery {delivery_id} -> {driver_score.driver_id}")


def run_simulation(drivers_csv, use_osrm=False, limit=5):
    print("=== STARTING DRIVER MATCHING SIMULATION ===")

    policy = policy_from_env()
    distance_provider = PreloadingDistanceProvider(OSRMClient()) if use_osrm else None

    writer = PrintingAssignmentWriter()
    dispatcher = MatchingDispatcher(
        driver_source=CsvDriverSource(drivers_csv),
        assignment_writer=writer,
        policy=policy,
        distance_provider=distance_provider,
    )

    requests_to_match = [
        DeliveryRequest("DEL-001", "CUST-1", (-26.195, 28.034), (-26.107, 28.056), ItemSize.SMALL, Urgency.LOW),
        DeliveryRequest("DEL-002", "CUST-2", (-26.204, 28.047), (-26.146, 28.041), ItemSize.MEDIUM, Urgency.MEDIUM),
        DeliveryRequest("DEL-003", "CUST-3", (-26.270, 28.112), (-26.187, 28.003), ItemSize.LARGE, Urgency.HIGH,
                        search_radius_km=12.0),
    ]

    for request in requests_to_match:
        criteria = request.to_criteria()
        print(f"\n--- {request.id} ({request.item_size.value}, {request.urgency.value} urgency) ---")

        for rank, match in enumerate(dispatcher.match(criteria, limit), 1):
            distance = "unknown" if match.distance_km is None else f"{match.distance_km:.1f}km"
            print(
                f"  {rank}. {match.driver_id}: score {match.score:.3f} "
                f"(dist {match.factors.distance:.2f}, vehicle {match.factors.vehicle_match:.2f}, "
                f"exp {match.factors.experience:.2f}) | {distance}, "
                f"eta {match.estimated_arrival_minutes} min, R{match.estimated_cost}"
            )

        if dispatcher.auto_assign(request.id, criteria) is None:
            print(f"[FAILED] {request.id} -> no driver available.")

    print("\n=== SIMULATION COMPLETE ===")
    print(f"Deliveries assigned: {len(writer.assignments)} / {len(requests_to_match)}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Rank mock drivers for a few sample deliveries.")
    parser.add_argument("--drivers", default=os.path.join("sampledata", "drivers.csv"))
    parser.add_argument("--osrm", action="store_true", help="use road distances from BASE_URL instead of great-circle")
    parser.add_argument("--limit", type=int, default=5)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run_simulation(args.drivers, use_osrm=args.osrm, limit=args.limit)
