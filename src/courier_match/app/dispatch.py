# app/dispatch.py
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime

from courier_match.app.engine import MatchEngine
from courier_match.app.protocols import AgentDirectory, AssignmentStore, DeliveryTracker
from courier_match.domain.entities.geography import GeoPoint
from courier_match.domain.entities.match import (
    AssignmentResult,
    DeliveryEstimate,
    DeliveryMatch,
    TrackingStatus,
)
from courier_match.domain.entities.request import DeliveryItem, DeliveryRequest
from courier_match.domain.errors import MatchingError


@dataclass(frozen=True)
class BulkFailure:
    order_id: str
    error: str


@dataclass(frozen=True)
class BulkSummary:
    total: int
    successful: int
    failed: int
    avg_confidence: float
    avg_distance_km: float


@dataclass
class BulkAssignment:
    assignments: list[AssignmentResult] = field(default_factory=list)
    failed: list[BulkFailure] = field(default_factory=list)
    summary: BulkSummary | None = None


class DeliveryDispatcher:
    """
    Fetch-then-match-then-persist around a MatchEngine.

    The engine holds no state, so a failure in the store after a successful
    match leaves nothing to roll back; collaborator errors propagate as-is.
    """

    def __init__(
        self,
        engine: MatchEngine,
        directory: AgentDirectory,
        store: AssignmentStore | None = None,
        tracker: DeliveryTracker | None = None,
    ):
        self.engine = engine
        self.directory = directory
        self.store = store
        self.tracker = tracker

    def find_matches(
        self, request: DeliveryRequest, *, now: datetime | None = None
    ) -> list[DeliveryMatch]:
        return self.engine.find_matches(request, self.directory.available_agents(), now=now)

    def _commit(self, request: DeliveryRequest, result: AssignmentResult) -> AssignmentResult:
        if self.store is None:
            return result
        tracking_id = self.store.persist_assignment(request, result)
        return replace(result, tracking_id=tracking_id) if tracking_id else result

    def assign(self, request: DeliveryRequest, *, now: datetime | None = None) -> AssignmentResult:
        result = self.engine.assign(request, self.directory.available_agents(), now=now)
        return self._commit(request, result)

    def estimate(
        self,
        pickup: GeoPoint,
        dropoff: GeoPoint,
        items: Sequence[DeliveryItem],
        priority: str = "standard",
        *,
        now: datetime | None = None,
    ) -> DeliveryEstimate:
        return self.engine.estimate(
            pickup, dropoff, items, priority, agents=self.directory.available_agents(), now=now
        )

    def track(self, tracking_id: str) -> TrackingStatus:
        if self.tracker is None:
            raise RuntimeError("no delivery tracker configured")
        return self.tracker.track(tracking_id)

    def bulk_assign(
        self, requests: Sequence[DeliveryRequest], *, now: datetime | None = None
    ) -> BulkAssignment:
        """
        Assign each request against one directory snapshot. An agent picked
        for one order stays in the pool for the next.
        """
        now = self.engine.resolve_now(now)
        agents = self.directory.available_agents()
        out = BulkAssignment()
        distances: list[float] = []
        for request in requests:
            try:
                match = self.engine.best_match(request, agents, now=now)
            except MatchingError as exc:
                self.engine.hooks.error(order_id=request.order_id, exc=exc)
                out.failed.append(BulkFailure(order_id=request.order_id, error=str(exc)))
                continue
            out.assignments.append(self._commit(request, self.engine.commit(request, match)))
            distances.append(match.estimated_distance_km)

        n = len(out.assignments)
        out.summary = BulkSummary(
            total=len(requests),
            successful=n,
            failed=len(out.failed),
            avg_confidence=sum(a.confidence for a in out.assignments) / n if n else 0.0,
            avg_distance_km=sum(distances) / n if n else 0.0,
        )
        return out
