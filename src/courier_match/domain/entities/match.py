# domain/entities/match.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from courier_match.domain.entities.agent import DeliveryAgent
from courier_match.domain.entities.geography import GeoPoint

Impact = Literal["positive", "negative", "neutral"]
TrackingState = Literal["assigned", "picked_up", "in_transit", "delivered", "failed"]


@dataclass(frozen=True)
class AssignmentFactor:
    name: str
    score: float  # 0..100, higher is better for the match
    weight: float  # signed contribution to confidence
    description: str
    impact: Impact


@dataclass(frozen=True)
class Route:
    pickup_time: datetime
    delivery_time: datetime
    total_distance_km: float
    estimated_duration_min: int  # pickup leg + delivery leg


@dataclass(frozen=True)
class DeliveryMatch:
    agent: DeliveryAgent
    estimated_distance_km: float  # pickup leg + delivery leg
    estimated_time_min: int  # delivery leg only
    delivery_cost: float
    confidence: float  # 0..100
    route: Route
    distance_to_pickup_km: float = 0.0
    factors: tuple[AssignmentFactor, ...] = ()


@dataclass(frozen=True)
class AssignmentResult:
    agent: DeliveryAgent
    tracking_id: str
    estimated_pickup: datetime
    estimated_delivery: datetime
    delivery_cost: float
    confidence: float


@dataclass(frozen=True)
class DeliveryEstimate:
    estimated_cost: float
    estimated_time_min: int
    available_agents: int


@dataclass(frozen=True)
class TrackingEntry:
    timestamp: datetime
    status: str
    location: GeoPoint | None = None
    notes: str | None = None


@dataclass(frozen=True)
class TrackingStatus:
    tracking_id: str
    status: TrackingState
    agent_id: str
    current_location: GeoPoint | None = None
    estimated_arrival: datetime | None = None
    history: tuple[TrackingEntry, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ConfidenceAssessment:
    level: Literal["low", "medium", "high"]
    description: str
    recommendations: tuple[str, ...] = ()
