import numpy as np
import pandas as pd

from drivers.models import DriverStatus, VehicleClass


def generate_mock_drivers(filename="mock_drivers_100.csv", count=100, seed=None):
    """
    Generates a CSV of candidate drivers scattered around a city centre,
    in the column layout CsvDriverSource reads.
    A few drivers get no location or no vehicle so degraded scoring is exercised too.
    """
    # Johannesburg CBD
    CENTER_LAT = -26.204103
    CENTER_LON = 28.047305

    rng = np.random.default_rng(seed)

    rows = []
    for i in range(count):
        # Scatter drivers roughly +/- 15km around the centre
        lat = CENTER_LAT + rng.uniform(-0.14, 0.14)
        lon = CENTER_LON + rng.uniform(-0.14, 0.14)

        # ~5% of drivers haven't shared their location yet
        has_location = rng.random() >= 0.05

        rows.append({
            "driver_id": f"DRV-{str(i + 1).zfill(3)}",
            "lat": round(lat, 6) if has_location else None,
            "lon": round(lon, 6) if has_location else None,
            "rating": round(float(np.clip(rng.normal(4.3, 0.5), 0.0, 5.0)), 1),
            "vehicle_class": rng.choice([v.value for v in VehicleClass] + [""], p=[0.4, 0.35, 0.2, 0.05]),
            "total_deliveries": int(rng.integers(0, 800)),
            # 70% available, 15% busy, 15% offline
            "status": rng.choice([s.value for s in DriverStatus], p=[0.7, 0.15, 0.15]),
        })

    df = pd.DataFrame(rows)
    df.to_csv(filename, index=False)

    print(f"Successfully generated {count} mock drivers into '{filename}'.")
    return df


if __name__ == "__main__":
    generate_mock_drivers()
