# courier_match/io/business_events.py

from dataclasses import dataclass


# Base type for analytics events (emitted after a decision, never fed back in)
@dataclass
class BizEvent:
    run_id: str
    at: str  # ISO-8601 wall time of the decision
    name: str  # stable event name


@dataclass
class MatchesRankedBiz(BizEvent):
    order_id: str
    pool: int
    eligible: int
    top_agent_id: str | None = None
    top_confidence: float | None = None


@dataclass
class NoAgentsBiz(BizEvent):
    order_id: str
    pool: int


@dataclass
class AgentAssignedBiz(BizEvent):
    order_id: str
    agent_id: str
    tracking_id: str
    delivery_cost: float
    confidence: float


@dataclass
class EstimateBiz(BizEvent):
    eligible: int
    estimated_cost: float | None = None
    estimated_time_min: int | None = None
