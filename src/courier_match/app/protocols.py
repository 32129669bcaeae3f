from collections.abc import Sequence
from datetime import datetime
from typing import Protocol, runtime_checkable

from courier_match.domain.entities.agent import DeliveryAgent
from courier_match.domain.entities.match import (
    AssignmentFactor,
    AssignmentResult,
    TrackingStatus,
)
from courier_match.domain.entities.request import DeliveryRequest


# ------------- Services --------------------
@runtime_checkable
class TravelTimeService(Protocol):
    """
    Whole minutes needed to cover `distance_km` with the given vehicle class.
    Units: kilometers in, integer minutes out.
    """

    def minutes(self, distance_km: float, vehicle_type: str) -> int: ...


# --------------- Policies -------------------------


@runtime_checkable
class PricingPolicy(Protocol):
    def cost(self, distance_km: float, minutes: float, priority: str, vehicle_type: str) -> float: ...


@runtime_checkable
class EligibilityPolicy(Protocol):
    """
    Responsibilities:
      • Hard pass/fail feasibility of one agent for one request.
      • Report the first failing rule (None when eligible).
    """

    def rejection(
        self,
        agent: DeliveryAgent,
        request: DeliveryRequest,
        distance_to_pickup_km: float,
        now: datetime,
    ) -> str | None: ...


@runtime_checkable
class ScoringPolicy(Protocol):
    def factors(
        self, agent: DeliveryAgent, request: DeliveryRequest, distance_to_pickup_km: float
    ) -> list[AssignmentFactor]: ...
    def confidence(self, factors: Sequence[AssignmentFactor]) -> float: ...


# --------------- Collaborators -------------------------


@runtime_checkable
class AgentDirectory(Protocol):
    """Source of candidate agents (backend API, database, fixtures)."""

    def available_agents(self) -> list[DeliveryAgent]: ...


@runtime_checkable
class AssignmentStore(Protocol):
    """Persists a committed assignment; returns the authoritative tracking id."""

    def persist_assignment(self, request: DeliveryRequest, result: AssignmentResult) -> str: ...


@runtime_checkable
class DeliveryTracker(Protocol):
    def track(self, tracking_id: str) -> TrackingStatus: ...
