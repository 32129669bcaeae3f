# tests/conftest.py
from datetime import UTC, datetime

import pytest

from courier_match.domain.entities.agent import (
    AgentPreferences,
    DeliveryAgent,
    Vehicle,
    WorkingHours,
)
from courier_match.domain.entities.geography import GeoPoint
from courier_match.domain.entities.request import DeliveryItem, DeliveryRequest

NOON = datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC)

# ~5 km north of the Lagos pickup (1 deg latitude ~ 111.195 km)
LAGOS_PICKUP = GeoPoint(6.5244, 3.3792, city="Lagos")
LAGOS_DROPOFF = GeoPoint(6.5244 + 5.0 / 111.195, 3.3792, city="Lagos")


def _agent(
    id="a1",
    *,
    vehicle="car",
    capacity_kg=50.0,
    at=GeoPoint(6.5300, 3.3800, city="Lagos"),
    rating=4.5,
    online=True,
    active=0,
    max_orders=3,
    completion=95.0,
    max_km=15.0,
    hours=("08:00", "20:00"),
    areas=("Lagos",),
) -> DeliveryAgent:
    return DeliveryAgent(
        id=id,
        name=f"Agent {id}",
        rating=rating,
        is_online=online,
        location=at,
        vehicle=Vehicle(type=vehicle, capacity_kg=capacity_kg),
        preferences=AgentPreferences(
            max_delivery_distance_km=max_km,
            working_hours=WorkingHours(*hours),
            delivery_areas=frozenset(areas),
        ),
        active_orders=active,
        max_concurrent_orders=max_orders,
        completion_rate_pct=completion,
    )


def _request(
    order_id="o-1",
    *,
    pickup=LAGOS_PICKUP,
    dropoff=LAGOS_DROPOFF,
    items=None,
    priority="standard",
) -> DeliveryRequest:
    if items is None:
        items = (DeliveryItem(id="i1", name="parcel", weight_kg=2.0),)
    return DeliveryRequest(
        order_id=order_id,
        customer_id="c-1",
        seller_id="s-1",
        pickup=pickup,
        dropoff=dropoff,
        items=tuple(items),
        priority=priority,
    )


@pytest.fixture
def make_agent():
    return _agent


@pytest.fixture
def make_request():
    return _request


@pytest.fixture
def now() -> datetime:
    return NOON


@pytest.fixture
def lagos_pool() -> list[DeliveryAgent]:
    return [
        _agent(
            "bike-1",
            vehicle="bike",
            capacity_kg=15.0,
            rating=3.0,
            completion=80.0,
            active=1,
            max_orders=2,
        ),
        _agent("car-1", vehicle="car", capacity_kg=50.0, rating=4.0, completion=80.0),
    ]
