# courier_match/policy/pricing.py

from courier_match.app.protocols import PricingPolicy
from courier_match.config.models import PricingModel


class TariffPricingPolicy(PricingPolicy):
    """(base + km * per_km + min * per_min) scaled by priority and vehicle class."""

    def __init__(self, model: PricingModel | None = None):
        self.model = model or PricingModel()

    def cost(self, distance_km: float, minutes: float, priority: str, vehicle_type: str) -> float:
        m = self.model
        subtotal = m.base_fee + distance_km * m.per_km_fee + minutes * m.per_minute_fee
        return subtotal * m.priority_multiplier[priority] * m.vehicle_multiplier[vehicle_type]

