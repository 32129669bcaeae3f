# io/match_logging.py
import json
import logging
import sys

from courier_match.app.hooks import NoopHooks
from courier_match.io.business_events import (
    AgentAssignedBiz,
    EstimateBiz,
    MatchesRankedBiz,
    NoAgentsBiz,
)
from courier_match.io.recorder import Recorder


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def _default_json_logger(name="courier_match", level="INFO"):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
        logger.setLevel(level)
    return logger


class MatchLogging(NoopHooks):
    """
    One place to shape and emit structured logs and business events for
    matching decisions.
    """

    def __init__(
        self,
        run_id: str = "local",
        clock=None,
        level: str = "INFO",
        debug: bool = False,
        logger: logging.Logger | None = None,
        recorder: Recorder | None = None,
    ):
        self.run_id, self.clock, self.debug = run_id, clock, debug
        self.recorder = recorder
        self.log = logger or _default_json_logger(level=level)

    # --------------- Helpers -----------------------------

    def _wall(self) -> str:
        return self.clock.now().isoformat() if self.clock else ""

    def _emit(self, level: str, msg: str, **extra):
        payload = {"run_id": self.run_id}
        wall = self._wall()
        if wall:
            payload["wall"] = wall
        self.log.log(getattr(logging, level), msg, extra={"extra": {**payload, **extra}})

    def _biz(self, ev):
        if self.recorder:
            self.recorder.emit(ev)

    # --------------------------------------------------------

    def agent_rejected(self, *, order_id, agent_id, reason, distance_km):
        if self.debug:
            self._emit(
                "DEBUG",
                "agent_rejected",
                order_id=order_id,
                agent_id=agent_id,
                reason=reason,
                distance_km=round(distance_km, 3),
            )

    def matches_ranked(self, *, order_id, pool, eligible, returned, top):
        self._emit(
            "INFO",
            "matches_ranked",
            order_id=order_id,
            pool=pool,
            eligible=eligible,
            returned=returned,
            top_agent_id=top.agent.id if top else None,
        )
        self._biz(
            MatchesRankedBiz(
                run_id=self.run_id,
                at=self._wall(),
                name="MatchesRanked",
                order_id=order_id,
                pool=pool,
                eligible=eligible,
                top_agent_id=top.agent.id if top else None,
                top_confidence=top.confidence if top else None,
            )
        )

    def no_agents(self, *, order_id, pool):
        self._emit("WARNING", "no_available_agents", order_id=order_id, pool=pool)
        self._biz(
            NoAgentsBiz(
                run_id=self.run_id, at=self._wall(), name="NoAgents", order_id=order_id, pool=pool
            )
        )

    def assigned(self, *, order_id, agent_id, tracking_id, cost, confidence):
        self._emit(
            "INFO",
            "agent_assigned",
            order_id=order_id,
            agent_id=agent_id,
            tracking_id=tracking_id,
            cost=round(cost, 2),
            confidence=confidence,
        )
        self._biz(
            AgentAssignedBiz(
                run_id=self.run_id,
                at=self._wall(),
                name="AgentAssigned",
                order_id=order_id,
                agent_id=agent_id,
                tracking_id=tracking_id,
                delivery_cost=cost,
                confidence=confidence,
            )
        )

    def estimated(self, *, pool, eligible, cost, minutes):
        self._emit("INFO", "estimated", pool=pool, eligible=eligible, cost=cost, minutes=minutes)
        self._biz(
            EstimateBiz(
                run_id=self.run_id,
                at=self._wall(),
                name="Estimate",
                eligible=eligible,
                estimated_cost=cost,
                estimated_time_min=minutes,
            )
        )

    def error(self, *, order_id, exc: BaseException, **extra):
        self._emit("ERROR", "matching_error", order_id=order_id, error=str(exc), **extra)
