# services/travel_time.py
from courier_match.app.protocols import TravelTimeService
from courier_match.domain.units import round_minutes

DEFAULT_SPEEDS_KMH = {"bike": 15.0, "scooter": 25.0, "car": 30.0, "van": 25.0}


class VehicleSpeedTravelTime(TravelTimeService):
    """Distance over an average per-vehicle speed, plus a stop/traffic buffer."""

    def __init__(
        self,
        speeds_kmh: dict[str, float] | None = None,
        min_buffer_min: float = 5.0,
        buffer_fraction: float = 0.2,
    ):
        self.speeds_kmh = dict(speeds_kmh or DEFAULT_SPEEDS_KMH)
        self.min_buffer_min = min_buffer_min
        self.buffer_fraction = buffer_fraction

    def speed_kmh(self, vehicle_type: str) -> float:
        try:
            return self.speeds_kmh[vehicle_type]
        except KeyError:
            raise ValueError(f"No average speed for vehicle {vehicle_type!r}")

    def minutes(self, distance_km: float, vehicle_type: str) -> int:
        t = distance_km / self.speed_kmh(vehicle_type) * 60.0
        buffer = max(self.min_buffer_min, t * self.buffer_fraction)
        return round_minutes(t + buffer)


class FixedDurationTravelTime(TravelTimeService):
    """Helper for tests; every leg takes the same number of minutes."""

    def __init__(self, minutes: int = 10):
        self.fixed = minutes

    def minutes(self, distance_km: float, vehicle_type: str) -> int:
        return self.fixed
