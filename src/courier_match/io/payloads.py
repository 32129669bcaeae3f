# io/payloads.py
"""
Decode agent/request payloads as served by the delivery backend
(camelCase JSON) into domain entities, and encode matches back.
"""

from collections.abc import Mapping
from datetime import datetime
from typing import Any

from courier_match.domain.entities.agent import (
    AgentPreferences,
    DeliveryAgent,
    Vehicle,
    WorkingHours,
)
from courier_match.domain.entities.geography import GeoPoint
from courier_match.domain.entities.match import AssignmentResult, DeliveryMatch
from courier_match.domain.entities.request import DeliveryItem, DeliveryRequest, Dimensions
from courier_match.domain.errors import InvalidRequest


def _req(d: Mapping, key: str, where: str):
    try:
        return d[key]
    except KeyError:
        raise InvalidRequest(f"{where}: missing {key!r}") from None


def _dt(v) -> datetime | None:
    return datetime.fromisoformat(v) if isinstance(v, str) else v


def parse_point(d: Mapping, where: str = "location") -> GeoPoint:
    return GeoPoint(
        latitude=_req(d, "latitude", where),
        longitude=_req(d, "longitude", where),
        address=d.get("address", ""),
        city=d.get("city", ""),
        state=d.get("state", ""),
        postal_code=d.get("postalCode", ""),
    )


def parse_agent(d: Mapping) -> DeliveryAgent:
    where = f"agent {d.get('id')!r}"
    vehicle = _req(d, "vehicle", where)
    prefs = _req(d, "preferences", where)
    hours = prefs.get("workingHours", {})
    return DeliveryAgent(
        id=str(_req(d, "id", where)),
        name=d.get("name", ""),
        rating=d.get("rating", 0.0),
        is_online=bool(d.get("isOnline", False)),
        location=parse_point(_req(d, "currentLocation", where), f"{where} currentLocation"),
        vehicle=Vehicle(type=_req(vehicle, "type", where), capacity_kg=_req(vehicle, "capacity", where)),
        preferences=AgentPreferences(
            max_delivery_distance_km=_req(prefs, "maxDeliveryDistance", where),
            working_hours=WorkingHours(
                start=hours.get("start", "00:00"), end=hours.get("end", "23:59")
            ),
            delivery_areas=frozenset(prefs.get("deliveryAreas", ())),
        ),
        active_orders=d.get("currentOrders", 0),
        max_concurrent_orders=d.get("maxConcurrentOrders", 1),
        completion_rate_pct=d.get("completionRate", 100.0),
        avg_delivery_time_min=d.get("avgDeliveryTime", 0.0),
    )


def parse_item(d: Mapping) -> DeliveryItem:
    dims = d.get("dimensions") or {}
    return DeliveryItem(
        id=str(_req(d, "id", "item")),
        name=d.get("name", ""),
        weight_kg=_req(d, "weight", f"item {d.get('id')!r}"),
        dimensions=Dimensions(
            length=dims.get("length", 0.0),
            width=dims.get("width", 0.0),
            height=dims.get("height", 0.0),
        ),
        fragile=bool(d.get("fragile", False)),
        perishable=bool(d.get("perishable", False)),
    )


def parse_request(d: Mapping) -> DeliveryRequest:
    where = "request"
    return DeliveryRequest(
        order_id=str(_req(d, "orderId", where)),
        customer_id=str(d.get("customerId", "")),
        seller_id=str(d.get("sellerId", "")),
        pickup=parse_point(_req(d, "pickupLocation", where), "pickupLocation"),
        dropoff=parse_point(_req(d, "deliveryLocation", where), "deliveryLocation"),
        items=tuple(parse_item(i) for i in d.get("items", ())),
        priority=d.get("priority", "standard"),
        scheduled_pickup=_dt(d.get("scheduledPickup")),
        requested_delivery=_dt(d.get("requestedDelivery")),
        instructions=d.get("specialInstructions"),
        total_value=d.get("totalValue", 0.0),
        payment_method=d.get("paymentMethod", "card"),
    )


def dump_match(m: DeliveryMatch) -> dict[str, Any]:
    return {
        "agentId": m.agent.id,
        "agentName": m.agent.name,
        "estimatedDistance": round(m.estimated_distance_km, 3),
        "estimatedTime": m.estimated_time_min,
        "deliveryCost": round(m.delivery_cost, 2),
        "confidence": round(m.confidence, 2),
        "route": {
            "pickupTime": m.route.pickup_time.isoformat(),
            "deliveryTime": m.route.delivery_time.isoformat(),
            "totalDistance": round(m.route.total_distance_km, 3),
            "estimatedDuration": m.route.estimated_duration_min,
        },
        "factors": [
            {"name": f.name, "score": round(f.score, 1), "weight": round(f.weight, 2), "impact": f.impact}
            for f in m.factors
        ],
    }


def dump_assignment(a: AssignmentResult) -> dict[str, Any]:
    return {
        "agentId": a.agent.id,
        "trackingId": a.tracking_id,
        "estimatedPickup": a.estimated_pickup.isoformat(),
        "estimatedDelivery": a.estimated_delivery.isoformat(),
        "deliveryCost": round(a.delivery_cost, 2),
        "confidence": round(a.confidence, 2),
    }
