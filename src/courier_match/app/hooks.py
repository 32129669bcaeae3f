# app/hooks.py
from typing import Protocol


class MatchHooks(Protocol):
    def agent_rejected(self, *, order_id, agent_id, reason, distance_km): ...
    def matches_ranked(self, *, order_id, pool, eligible, returned, top): ...
    def no_agents(self, *, order_id, pool): ...
    def assigned(self, *, order_id, agent_id, tracking_id, cost, confidence): ...
    def estimated(self, *, pool, eligible, cost, minutes): ...
    def error(self, *, order_id, exc: BaseException, **kw): ...


class NoopHooks:
    def agent_rejected(self, **_):
        pass

    def matches_ranked(self, **_):
        pass

    def no_agents(self, **_):
        pass

    def assigned(self, **_):
        pass

    def estimated(self, **_):
        pass

    def error(self, **_):
        pass
