# courier_match/policy/eligibility.py
from datetime import datetime

from courier_match.app.protocols import EligibilityPolicy
from courier_match.config.models import EligibilityModel
from courier_match.domain.entities.agent import DeliveryAgent
from courier_match.domain.entities.request import DeliveryRequest
from courier_match.runtime.clock import hour_at

# rejection reasons, in the order the rules are evaluated
OFFLINE = "offline"
AT_CAPACITY = "at_capacity"
OVERWEIGHT = "overweight"
OUTSIDE_AREA = "outside_area"
TOO_FAR = "too_far"
OFF_SHIFT = "off_shift"


class RuleBasedEligibility(EligibilityPolicy):
    def __init__(self, model: EligibilityModel | None = None):
        self.model = model or EligibilityModel()

    def rejection(
        self,
        agent: DeliveryAgent,
        request: DeliveryRequest,
        distance_to_pickup_km: float,
        now: datetime,
    ) -> str | None:
        m = self.model
        prefs = agent.preferences
        if m.require_online and not agent.is_online:
            return OFFLINE
        if m.require_capacity and not agent.has_capacity:
            return AT_CAPACITY
        if m.check_weight and request.total_weight_kg > agent.vehicle.capacity_kg:
            return OVERWEIGHT
        if m.check_area and not prefs.serves(request.dropoff.city):
            return OUTSIDE_AREA
        if m.check_distance and distance_to_pickup_km > prefs.max_delivery_distance_km:
            return TOO_FAR
        if m.check_working_hours:
            hour = hour_at(now, tz=m.working_hours_tz)
            if not prefs.working_hours.covers_hour(hour):
                return OFF_SHIFT
        return None

    def is_eligible(self, agent, request, distance_to_pickup_km, now) -> bool:
        return self.rejection(agent, request, distance_to_pickup_km, now) is None
