# courier_match/policy/scoring.py
"""
Confidence scoring for agent/request pairs.

Confidence is a 0..100 ranking heuristic, not a probability. It starts at
`ScoringModel.base` and each factor adds its signed `weight`; the result is
clamped. Factors are kept on the match so callers can explain a ranking.
"""

from collections.abc import Sequence

from courier_match.app.protocols import ScoringPolicy
from courier_match.config.models import ScoringModel
from courier_match.domain.entities.agent import DeliveryAgent
from courier_match.domain.entities.match import AssignmentFactor, ConfidenceAssessment
from courier_match.domain.entities.request import DeliveryRequest

FRAGILE_SAFE = frozenset({"car", "van"})
PERISHABLE_FAST = frozenset({"bike", "scooter"})


def _impact(weight: float) -> str:
    if weight > 0:
        return "positive"
    if weight < 0:
        return "negative"
    return "neutral"


def _pct(x: float) -> float:
    return max(0.0, min(100.0, x))


class WeightedConfidence(ScoringPolicy):
    def __init__(self, model: ScoringModel | None = None):
        self.model = model or ScoringModel()

    def factors(
        self, agent: DeliveryAgent, request: DeliveryRequest, distance_to_pickup_km: float
    ) -> list[AssignmentFactor]:
        m = self.model
        out: list[AssignmentFactor] = []

        penalty = min(distance_to_pickup_km * m.distance_penalty_per_km, m.distance_penalty_cap)
        cap = m.distance_penalty_cap or 1.0
        out.append(
            AssignmentFactor(
                name="distance",
                score=_pct(100.0 - penalty / cap * 100.0),
                weight=-penalty,
                description=f"{distance_to_pickup_km:.1f} km to pickup",
                impact=_impact(-penalty),
            )
        )

        w = (agent.rating - m.rating_pivot) * m.rating_weight
        out.append(
            AssignmentFactor(
                name="rating",
                score=_pct(agent.rating / 5.0 * 100.0),
                weight=w,
                description=f"rated {agent.rating:.1f}/5",
                impact=_impact(w),
            )
        )

        w = (agent.completion_rate_pct - m.completion_pivot) * m.completion_weight
        out.append(
            AssignmentFactor(
                name="completion",
                score=_pct(agent.completion_rate_pct),
                weight=w,
                description=f"{agent.completion_rate_pct:.0f}% of deliveries completed",
                impact=_impact(w),
            )
        )

        w = -(agent.load * m.load_penalty)
        out.append(
            AssignmentFactor(
                name="load",
                score=_pct((1.0 - agent.load) * 100.0),
                weight=w,
                description=f"{agent.active_orders}/{agent.max_concurrent_orders} active orders",
                impact=_impact(w),
            )
        )

        vtype = agent.vehicle.type
        if request.has_fragile and vtype in FRAGILE_SAFE:
            w, why = m.fragile_bonus, f"{vtype} suits fragile items"
        elif request.has_perishable and vtype in PERISHABLE_FAST:
            w, why = m.perishable_bonus, f"{vtype} is quick for perishable items"
        else:
            w, why = 0.0, f"{vtype} has no special fit"
        out.append(
            AssignmentFactor(
                name="vehicle_fit",
                score=100.0 if w > 0 else 50.0,
                weight=w,
                description=why,
                impact=_impact(w),
            )
        )

        # informational only
        cap_kg = agent.vehicle.capacity_kg
        headroom = (1.0 - request.total_weight_kg / cap_kg) * 100.0 if cap_kg > 0 else 0.0
        out.append(
            AssignmentFactor(
                name="capacity",
                score=_pct(headroom),
                weight=0.0,
                description=f"{request.total_weight_kg:g} of {cap_kg:g} kg",
                impact="neutral",
            )
        )
        return out

    def confidence(self, factors: Sequence[AssignmentFactor]) -> float:
        c = self.model.base
        for f in factors:
            c += f.weight
        return max(0.0, min(100.0, c))

    def score(
        self, agent: DeliveryAgent, request: DeliveryRequest, distance_to_pickup_km: float
    ) -> float:
        return self.confidence(self.factors(agent, request, distance_to_pickup_km))


_WEAK_FACTOR_ADVICE = {
    "distance": "Consider agents closer to pickup location",
    "rating": "Agent has lower rating - monitor closely",
    "capacity": "Vehicle capacity is near limit",
    "load": "Agent is already busy with other orders",
}


def assess_confidence(
    score: float,
    factors: Sequence[AssignmentFactor] = (),
    model: ScoringModel | None = None,
) -> ConfidenceAssessment:
    """Bucket a confidence score into high/medium/low with follow-up advice."""
    m = model or ScoringModel()
    if score >= m.high_threshold:
        return ConfidenceAssessment(
            level="high",
            description="Excellent match with high probability of success",
            recommendations=("Assign immediately", "Expected quick acceptance"),
        )
    if score >= m.medium_threshold:
        advice = [
            _WEAK_FACTOR_ADVICE[f.name]
            for f in factors
            if f.score < 50 and f.name in _WEAK_FACTOR_ADVICE
        ]
        return ConfidenceAssessment(
            level="medium",
            description="Good match with moderate probability of success",
            recommendations=tuple(advice) or ("Monitor assignment closely",),
        )
    return ConfidenceAssessment(
        level="low",
        description="Poor match with low probability of success",
        recommendations=(
            "Consider alternative agents",
            "Review assignment criteria",
            "May need manual intervention",
        ),
    )
