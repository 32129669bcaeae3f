# domain/validation.py
import re
from collections.abc import Iterable
from math import isfinite

from courier_match.domain.entities.agent import VEHICLE_TYPES, DeliveryAgent
from courier_match.domain.entities.geography import GeoPoint
from courier_match.domain.entities.request import PRIORITIES, DeliveryItem, DeliveryRequest
from courier_match.domain.errors import InvalidRequest

_HHMM = re.compile(r"^(?:([01]?\d|2[0-3]):[0-5]\d|24:00)$")


def _finite(name: str, v) -> float:
    if not isinstance(v, (int, float)) or isinstance(v, bool) or not isfinite(float(v)):
        raise InvalidRequest(f"{name} must be a finite number, got {v!r}")
    return float(v)


def validate_point(p: GeoPoint, *, name: str = "location") -> None:
    if not isinstance(p, GeoPoint):
        raise InvalidRequest(f"{name} is missing")
    lat = _finite(f"{name}.latitude", p.latitude)
    lon = _finite(f"{name}.longitude", p.longitude)
    if not -90.0 <= lat <= 90.0:
        raise InvalidRequest(f"{name}.latitude out of range: {lat}")
    if not -180.0 <= lon <= 180.0:
        raise InvalidRequest(f"{name}.longitude out of range: {lon}")


def validate_items(items: Iterable[DeliveryItem]) -> None:
    for item in items:
        if _finite(f"item {item.id!r} weight_kg", item.weight_kg) < 0:
            raise InvalidRequest(f"item {item.id!r} has negative weight {item.weight_kg}")


def validate_priority(priority: str) -> None:
    if priority not in PRIORITIES:
        raise InvalidRequest(f"unknown priority {priority!r}; expected one of {PRIORITIES}")


def validate_request(request: DeliveryRequest) -> None:
    validate_point(request.pickup, name="pickup")
    validate_point(request.dropoff, name="dropoff")
    validate_items(request.items)
    validate_priority(request.priority)


def validate_agent(agent: DeliveryAgent) -> None:
    who = f"agent {agent.id!r}"
    validate_point(agent.location, name=f"{who} location")
    if agent.vehicle.type not in VEHICLE_TYPES:
        raise InvalidRequest(f"{who} has unknown vehicle {agent.vehicle.type!r}")
    if _finite(f"{who} capacity_kg", agent.vehicle.capacity_kg) < 0:
        raise InvalidRequest(f"{who} has negative capacity {agent.vehicle.capacity_kg}")
    if agent.max_concurrent_orders <= 0:
        raise InvalidRequest(f"{who} max_concurrent_orders must be > 0")
    active = agent.active_orders
    if not isinstance(active, int) or isinstance(active, bool) or active < 0:
        raise InvalidRequest(f"{who} active_orders must be a non-negative int, got {active!r}")
    for hhmm in (agent.preferences.working_hours.start, agent.preferences.working_hours.end):
        if not isinstance(hhmm, str) or not _HHMM.match(hhmm):
            raise InvalidRequest(f"{who} has malformed working hours {hhmm!r}")
    _finite(f"{who} rating", agent.rating)
    _finite(f"{who} completion_rate_pct", agent.completion_rate_pct)
    max_km = agent.preferences.max_delivery_distance_km
    if _finite(f"{who} max_delivery_distance_km", max_km) < 0:
        raise InvalidRequest(f"{who} has negative max_delivery_distance_km {max_km}")
