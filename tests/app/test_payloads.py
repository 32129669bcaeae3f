from datetime import UTC, datetime

import pytest

from courier_match.app.engine import MatchEngine
from courier_match.domain.errors import InvalidRequest
from courier_match.io.payloads import (
    dump_assignment,
    dump_match,
    parse_agent,
    parse_request,
)
from courier_match.runtime.clock import FixedClock

AGENT = {
    "id": "2",
    "name": "Sarah Wilson",
    "rating": 4.9,
    "isOnline": True,
    "currentLocation": {
        "latitude": 40.7589,
        "longitude": -73.9851,
        "address": "456 Park Ave",
        "city": "New York",
        "state": "NY",
        "postalCode": "10022",
    },
    "vehicle": {"type": "car", "capacity": 50},
    "preferences": {
        "maxDeliveryDistance": 15,
        "workingHours": {"start": "09:00", "end": "22:00"},
        "deliveryAreas": ["Manhattan", "Queens", "Brooklyn"],
    },
    "currentOrders": 0,
    "maxConcurrentOrders": 4,
    "completionRate": 98,
    "avgDeliveryTime": 30,
}

REQUEST = {
    "orderId": "ord-77",
    "customerId": "cust-1",
    "sellerId": "sell-1",
    "pickupLocation": {"latitude": 40.7128, "longitude": -74.0060, "city": "New York"},
    "deliveryLocation": {"latitude": 40.7306, "longitude": -73.9866, "city": "Manhattan"},
    "items": [
        {
            "id": "i1",
            "name": "Glass vase",
            "weight": 3.5,
            "dimensions": {"length": 30, "width": 20, "height": 20},
            "fragile": True,
            "perishable": False,
        }
    ],
    "priority": "express",
    "scheduledPickup": "2025-01-01T14:00:00+00:00",
    "totalValue": 120.0,
    "paymentMethod": "card",
}


def test_parse_agent():
    a = parse_agent(AGENT)
    assert a.id == "2"
    assert a.vehicle.type == "car" and a.vehicle.capacity_kg == 50
    assert a.location.postal_code == "10022"
    assert a.preferences.working_hours.start_hour == 9
    assert a.preferences.delivery_areas == frozenset({"Manhattan", "Queens", "Brooklyn"})
    assert a.max_concurrent_orders == 4


def test_parse_request():
    r = parse_request(REQUEST)
    assert r.order_id == "ord-77"
    assert r.priority == "express"
    assert r.total_weight_kg == 3.5
    assert r.has_fragile and not r.has_perishable
    assert r.scheduled_pickup == datetime(2025, 1, 1, 14, 0, tzinfo=UTC)
    assert r.items[0].dimensions.length == 30


def test_missing_fields_raise_invalid_request():
    with pytest.raises(InvalidRequest, match="currentLocation"):
        parse_agent({k: v for k, v in AGENT.items() if k != "currentLocation"})
    with pytest.raises(InvalidRequest, match="orderId"):
        parse_request({k: v for k, v in REQUEST.items() if k != "orderId"})


def test_round_trip_through_engine():
    eng = MatchEngine(clock=FixedClock.utc(2025, 1, 1, 15, 0, 0))
    req = parse_request(REQUEST)
    agent = parse_agent(AGENT)
    (m,) = eng.find_matches(req, [agent])
    out = dump_match(m)
    assert out["agentId"] == "2"
    assert out["route"]["estimatedDuration"] == m.route.estimated_duration_min
    assert {f["name"] for f in out["factors"]} >= {"distance", "vehicle_fit"}

    res = dump_assignment(eng.assign(req, [agent]))
    assert res["trackingId"].startswith("TRK-")
    assert res["estimatedDelivery"] == m.route.delivery_time.isoformat()
