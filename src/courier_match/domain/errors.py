# domain/errors.py


class MatchingError(Exception):
    """Base class for delivery matching failures."""


class InvalidRequest(MatchingError, ValueError):
    """Malformed request or agent data (bad coordinates, negative weights, ...)."""


class NoAvailableAgents(MatchingError):
    """No agent passed the eligibility filter.

    A normal business outcome: callers are expected to catch it and offer a
    fallback (reschedule, widen the search) rather than treat it as a crash.
    """

    def __init__(self, order_id: str, pool_size: int = 0):
        self.order_id = order_id
        self.pool_size = pool_size
        super().__init__(
            f"no available delivery agents for order {order_id!r} "
            f"({pool_size} candidates checked)"
        )
