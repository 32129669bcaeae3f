# app/engine.py
"""
Delivery matching engine.

Pure computation over in-memory data: callers fetch the agent pool, the
engine filters, scores and ranks it, and callers persist whatever they
commit. The only implicit input is "now", read from the injected clock
unless passed explicitly.
"""

from collections.abc import Sequence
from datetime import datetime
from zlib import crc32

import numpy as np

from courier_match.app.hooks import MatchHooks, NoopHooks
from courier_match.app.protocols import (
    EligibilityPolicy,
    PricingPolicy,
    ScoringPolicy,
    TravelTimeService,
)
from courier_match.config.models import PricingModel
from courier_match.domain.entities.agent import DeliveryAgent
from courier_match.domain.entities.geography import GeoPoint
from courier_match.domain.entities.match import (
    AssignmentResult,
    DeliveryEstimate,
    DeliveryMatch,
    Route,
)
from courier_match.domain.entities.request import DeliveryItem, DeliveryRequest
from courier_match.domain.errors import NoAvailableAgents
from courier_match.domain.geo import haversine_km, haversine_km_many
from courier_match.domain.units import round_half_up, round_minutes
from courier_match.domain.validation import validate_agent, validate_request
from courier_match.policy.eligibility import RuleBasedEligibility
from courier_match.policy.pricing import TariffPricingPolicy
from courier_match.policy.scoring import WeightedConfidence
from courier_match.runtime.clock import Clock, SystemClock, minutes
from courier_match.services.travel_time import VehicleSpeedTravelTime

DEFAULT_TOP_N = 5


def tracking_id_for(order_id: str, agent_id: str) -> str:
    """Stable tracking id for an (order, agent) pair."""
    return f"TRK-{crc32(f'{order_id}:{agent_id}'.encode('utf-8')) & 0xFFFFFFFF:08X}"


class MatchEngine:
    def __init__(
        self,
        pricing: PricingPolicy | PricingModel | None = None,
        travel_time: TravelTimeService | None = None,
        clock: Clock | None = None,
        *,
        eligibility: EligibilityPolicy | None = None,
        scoring: ScoringPolicy | None = None,
        top_n: int = DEFAULT_TOP_N,
        hooks: MatchHooks | None = None,
    ):
        if pricing is None or isinstance(pricing, PricingModel):
            pricing = TariffPricingPolicy(pricing)
        if top_n < 1:
            raise ValueError(f"top_n must be >= 1, got {top_n}")
        self.pricing = pricing
        self.travel_time = travel_time or VehicleSpeedTravelTime()
        self.clock = clock or SystemClock()
        self.eligibility = eligibility or RuleBasedEligibility()
        self.scoring = scoring or WeightedConfidence()
        self.top_n = top_n
        self.hooks = hooks or NoopHooks()

    def resolve_now(self, now: datetime | None = None) -> datetime:
        return now if now is not None else self.clock.now()

    # ------------ per-agent computation --------------

    def eligible_agents(
        self, request: DeliveryRequest, agents: Sequence[DeliveryAgent], now: datetime
    ) -> list[tuple[DeliveryAgent, float]]:
        """Agents passing every feasibility rule, paired with their km to pickup."""
        for agent in agents:
            validate_agent(agent)
        distances = haversine_km_many(request.pickup, [a.location for a in agents])
        out: list[tuple[DeliveryAgent, float]] = []
        for agent, d in zip(agents, distances):
            d = float(d)
            reason = self.eligibility.rejection(agent, request, d, now)
            if reason is not None:
                self.hooks.agent_rejected(
                    order_id=request.order_id, agent_id=agent.id, reason=reason, distance_km=d
                )
                continue
            out.append((agent, d))
        return out

    def evaluate(
        self,
        request: DeliveryRequest,
        agent: DeliveryAgent,
        distance_to_pickup_km: float,
        now: datetime,
        *,
        delivery_leg_km: float | None = None,
    ) -> DeliveryMatch:
        """Distance, time, cost, route and confidence for one eligible agent."""
        vtype = agent.vehicle.type
        if delivery_leg_km is None:
            delivery_leg_km = haversine_km(request.pickup, request.dropoff)
        total_km = distance_to_pickup_km + delivery_leg_km

        # cost reflects the delivery leg's time; the route ETA adds the pickup leg
        leg_min = self.travel_time.minutes(delivery_leg_km, vtype)
        to_pickup_min = self.travel_time.minutes(distance_to_pickup_km, vtype)
        cost = self.pricing.cost(total_km, leg_min, request.priority, vtype)

        factors = self.scoring.factors(agent, request, distance_to_pickup_km)
        pickup_time = now + minutes(to_pickup_min)
        return DeliveryMatch(
            agent=agent,
            estimated_distance_km=total_km,
            estimated_time_min=leg_min,
            delivery_cost=cost,
            confidence=self.scoring.confidence(factors),
            route=Route(
                pickup_time=pickup_time,
                delivery_time=pickup_time + minutes(leg_min),
                total_distance_km=total_km,
                estimated_duration_min=to_pickup_min + leg_min,
            ),
            distance_to_pickup_km=distance_to_pickup_km,
            factors=tuple(factors),
        )

    def _score_pool(
        self, request: DeliveryRequest, agents: Sequence[DeliveryAgent], now: datetime
    ) -> list[DeliveryMatch]:
        validate_request(request)
        eligible = self.eligible_agents(request, agents, now)
        leg_km = haversine_km(request.pickup, request.dropoff)
        return [self.evaluate(request, a, d, now, delivery_leg_km=leg_km) for a, d in eligible]

    # ------------ operations --------------

    def find_matches(
        self,
        request: DeliveryRequest,
        agents: Sequence[DeliveryAgent],
        *,
        now: datetime | None = None,
        limit: int | None = None,
    ) -> list[DeliveryMatch]:
        """
        Rank eligible agents by confidence, best first, capped at `limit`
        (default `top_n`). An empty list means no agent is available.
        """
        if limit is not None and limit < 1:
            raise ValueError(f"limit must be >= 1, got {limit}")
        now = self.resolve_now(now)
        scored = self._score_pool(request, agents, now)
        if not scored:
            self.hooks.no_agents(order_id=request.order_id, pool=len(agents))
            return []
        # sorted() is stable: equal confidence keeps pool order
        ranked = sorted(scored, key=lambda m: m.confidence, reverse=True)
        top = ranked[: self.top_n if limit is None else limit]
        self.hooks.matches_ranked(
            order_id=request.order_id,
            pool=len(agents),
            eligible=len(scored),
            returned=len(top),
            top=top[0],
        )
        return top

    def best_match(
        self,
        request: DeliveryRequest,
        agents: Sequence[DeliveryAgent],
        *,
        now: datetime | None = None,
    ) -> DeliveryMatch:
        """Highest-confidence match; raises NoAvailableAgents when there is none."""
        matches = self.find_matches(request, agents, now=now, limit=1)
        if not matches:
            raise NoAvailableAgents(request.order_id, pool_size=len(agents))
        return matches[0]

    def commit(self, request: DeliveryRequest, match: DeliveryMatch) -> AssignmentResult:
        result = AssignmentResult(
            agent=match.agent,
            tracking_id=tracking_id_for(request.order_id, match.agent.id),
            estimated_pickup=match.route.pickup_time,
            estimated_delivery=match.route.delivery_time,
            delivery_cost=match.delivery_cost,
            confidence=match.confidence,
        )
        self.hooks.assigned(
            order_id=request.order_id,
            agent_id=match.agent.id,
            tracking_id=result.tracking_id,
            cost=result.delivery_cost,
            confidence=result.confidence,
        )
        return result

    def assign(
        self,
        request: DeliveryRequest,
        agents: Sequence[DeliveryAgent],
        *,
        now: datetime | None = None,
    ) -> AssignmentResult:
        """
        Commit to the highest-confidence match. Nothing is persisted here;
        raises NoAvailableAgents when the pool has no eligible agent.
        """
        return self.commit(request, self.best_match(request, agents, now=now))

    def estimate(
        self,
        pickup: GeoPoint,
        dropoff: GeoPoint,
        items: Sequence[DeliveryItem],
        priority: str = "standard",
        *,
        agents: Sequence[DeliveryAgent],
        now: datetime | None = None,
    ) -> DeliveryEstimate:
        """Mean cost and delivery-leg time over every eligible agent."""
        request = DeliveryRequest(
            order_id="estimate",
            customer_id="estimate",
            seller_id="estimate",
            pickup=pickup,
            dropoff=dropoff,
            items=tuple(items),
            priority=priority,
        )
        scored = self._score_pool(request, agents, self.resolve_now(now))
        if not scored:
            self.hooks.no_agents(order_id=request.order_id, pool=len(agents))
            raise NoAvailableAgents(request.order_id, pool_size=len(agents))

        costs = np.array([m.delivery_cost for m in scored], dtype=float)
        times = np.array([m.estimated_time_min for m in scored], dtype=float)
        est = DeliveryEstimate(
            estimated_cost=round_half_up(float(costs.mean()), 2),
            estimated_time_min=round_minutes(float(times.mean())),
            available_agents=len(scored),
        )
        self.hooks.estimated(
            pool=len(agents),
            eligible=est.available_agents,
            cost=est.estimated_cost,
            minutes=est.estimated_time_min,
        )
        return est
