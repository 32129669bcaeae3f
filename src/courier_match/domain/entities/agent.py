# domain/entities/agent.py
from dataclasses import dataclass, field
from typing import Literal

from courier_match.domain.entities.geography import GeoPoint

VehicleType = Literal["bike", "scooter", "car", "van"]
VEHICLE_TYPES: tuple[str, ...] = ("bike", "scooter", "car", "van")


def _hour_of(hhmm: str) -> int:
    return int(hhmm.split(":")[0])


@dataclass(frozen=True)
class Vehicle:
    type: VehicleType
    capacity_kg: float


@dataclass(frozen=True)
class WorkingHours:
    start: str = "00:00"  # "HH:MM", agent-local
    end: str = "23:59"

    @property
    def start_hour(self) -> int:
        return _hour_of(self.start)

    @property
    def end_hour(self) -> int:
        return _hour_of(self.end)

    def covers_hour(self, hour: int) -> bool:
        # hour component only; minutes are ignored on both ends
        return self.start_hour <= hour < self.end_hour


@dataclass(frozen=True)
class AgentPreferences:
    max_delivery_distance_km: float
    working_hours: WorkingHours = field(default_factory=WorkingHours)
    delivery_areas: frozenset[str] = frozenset()

    def serves(self, city: str) -> bool:
        """True when `city` and any area contain one another, ignoring case."""
        c = city.lower()
        for area in self.delivery_areas:
            a = area.lower()
            if a in c or c in a:
                return True
        return False


@dataclass(frozen=True)
class DeliveryAgent:
    id: str
    name: str
    rating: float  # 0..5
    is_online: bool
    location: GeoPoint
    vehicle: Vehicle
    preferences: AgentPreferences
    active_orders: int = 0
    max_concurrent_orders: int = 1
    completion_rate_pct: float = 100.0
    avg_delivery_time_min: float = 0.0

    @property
    def has_capacity(self) -> bool:
        return self.active_orders < self.max_concurrent_orders

    @property
    def load(self) -> float:
        """Fraction of concurrent-order slots in use."""
        return self.active_orders / self.max_concurrent_orders
