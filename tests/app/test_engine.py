from dataclasses import replace
from datetime import timedelta

import numpy as np
import pytest

from courier_match.app.engine import MatchEngine, tracking_id_for
from courier_match.config.models import PricingModel
from courier_match.domain.entities.geography import GeoPoint
from courier_match.domain.entities.request import DeliveryItem
from courier_match.domain.errors import InvalidRequest, NoAvailableAgents
from courier_match.domain.geo import haversine_km
from courier_match.domain.units import round_half_up
from courier_match.runtime.clock import FixedClock
from courier_match.services.travel_time import VehicleSpeedTravelTime


@pytest.fixture
def engine(now) -> MatchEngine:
    return MatchEngine(PricingModel(), VehicleSpeedTravelTime(), FixedClock(now))


def _synthetic_pool(make_agent, n: int, seed: int = 11):
    rng = np.random.default_rng(seed)
    vehicles = ["bike", "scooter", "car", "van"]
    pool = []
    for i in range(n):
        max_orders = int(rng.integers(1, 6))
        pool.append(
            make_agent(
                f"ag-{i}",
                vehicle=vehicles[int(rng.integers(0, 4))],
                capacity_kg=float(rng.uniform(0.5, 60.0)),
                at=GeoPoint(
                    6.5244 + float(rng.normal(0, 0.05)), 3.3792 + float(rng.normal(0, 0.05))
                ),
                rating=float(rng.uniform(0, 5)),
                online=bool(rng.random() < 0.9),
                active=int(rng.integers(0, max_orders + 1)),
                max_orders=max_orders,
                completion=float(rng.uniform(0, 100)),
                max_km=float(rng.uniform(1, 20)),
            )
        )
    return pool


# ---------- end-to-end scenario


def test_lagos_bike_vs_car(engine, lagos_pool, make_request, now):
    req = make_request()
    matches = engine.find_matches(req, lagos_pool)
    assert len(matches) == 2
    by_id = {m.agent.id: m for m in matches}
    car, bike = by_id["car-1"], by_id["bike-1"]

    assert car.estimated_time_min < bike.estimated_time_min
    assert (car.estimated_time_min, bike.estimated_time_min) == (15, 25)
    assert car.delivery_cost > 0 and bike.delivery_cost > 0
    assert car.confidence != bike.confidence
    assert matches[0].confidence == max(car.confidence, bike.confidence)
    assert matches[0].agent.id == "car-1"


def test_match_fields(engine, make_agent, make_request, now):
    agent = make_agent(vehicle="scooter")
    req = make_request()
    (m,) = engine.find_matches(req, [agent])

    to_pickup = haversine_km(agent.location, req.pickup)
    leg = haversine_km(req.pickup, req.dropoff)
    tt = VehicleSpeedTravelTime()
    assert m.distance_to_pickup_km == pytest.approx(to_pickup)
    assert m.estimated_distance_km == pytest.approx(to_pickup + leg)
    assert m.route.total_distance_km == m.estimated_distance_km
    assert m.estimated_time_min == tt.minutes(leg, "scooter")

    pickup_min = tt.minutes(to_pickup, "scooter")
    assert m.route.pickup_time == now + timedelta(minutes=pickup_min)
    assert m.route.delivery_time == m.route.pickup_time + timedelta(minutes=m.estimated_time_min)
    assert m.route.estimated_duration_min == pickup_min + m.estimated_time_min

    # cost uses the total distance and the delivery leg's minutes
    expected = (3.99 + (to_pickup + leg) * 0.5 + m.estimated_time_min * 0.1) * 1.0 * 1.0
    assert m.delivery_cost == pytest.approx(expected)


def test_urgent_costs_twice_standard(engine, lagos_pool, make_request):
    std = {m.agent.id: m.delivery_cost for m in engine.find_matches(make_request(), lagos_pool)}
    urg = {
        m.agent.id: m.delivery_cost
        for m in engine.find_matches(make_request(priority="urgent"), lagos_pool)
    }
    for agent_id, cost in std.items():
        assert urg[agent_id] == pytest.approx(2 * cost, rel=1e-12)


# ---------- properties over synthetic pools


def test_confidence_bounds_and_ordering(engine, make_agent, make_request):
    pool = _synthetic_pool(make_agent, 60)
    matches = engine.find_matches(make_request(), pool, limit=len(pool))
    assert matches, "synthetic pool should have some eligible agents"
    conf = [m.confidence for m in matches]
    assert all(0.0 <= c <= 100.0 for c in conf)
    assert conf == sorted(conf, reverse=True)


def test_idempotent(engine, make_agent, make_request, now):
    pool = _synthetic_pool(make_agent, 40, seed=3)
    a = engine.find_matches(make_request(), pool, now=now)
    b = engine.find_matches(make_request(), pool, now=now)
    assert a == b
    assert [m.agent.id for m in a] == [m.agent.id for m in b]


def test_overweight_agents_never_returned(engine, make_agent, make_request):
    items = [
        DeliveryItem(id="tv", name="tv", weight_kg=18.0),
        DeliveryItem(id="r", name="r", weight_kg=4.5),
    ]
    pool = _synthetic_pool(make_agent, 80, seed=5)
    matches = engine.find_matches(make_request(items=items), pool, limit=len(pool))
    assert all(m.agent.vehicle.capacity_kg >= 22.5 for m in matches)


def test_top_n_cap_and_stable_ties(engine, make_agent, make_request):
    # identical agents at the same spot tie on confidence; pool order is kept
    pool = [make_agent(f"twin-{i}") for i in range(8)]
    matches = engine.find_matches(make_request(), pool)
    assert [m.agent.id for m in matches] == [f"twin-{i}" for i in range(5)]


def test_configurable_top_n(now, make_agent, make_request):
    eng = MatchEngine(clock=FixedClock(now), top_n=2)
    pool = [make_agent(f"a{i}") for i in range(4)]
    assert len(eng.find_matches(make_request(), pool)) == 2
    with pytest.raises(ValueError):
        MatchEngine(top_n=0)


def test_explicit_now_overrides_clock(engine, lagos_pool, make_request, now):
    late = now.replace(hour=23)
    assert engine.find_matches(make_request(), lagos_pool, now=late) == []


# ---------- no agents


def test_empty_pool(engine, make_request):
    assert engine.find_matches(make_request(), []) == []
    with pytest.raises(NoAvailableAgents):
        engine.assign(make_request(), [])


def test_nobody_eligible(engine, lagos_pool, make_request):
    far = GeoPoint(9.0765, 7.3986, city="Abuja")
    req = make_request(dropoff=far)
    assert engine.find_matches(req, lagos_pool) == []
    with pytest.raises(NoAvailableAgents) as ei:
        engine.assign(req, lagos_pool)
    assert ei.value.order_id == req.order_id
    assert ei.value.pool_size == 2


def test_invalid_request_fails_fast(engine, lagos_pool, make_request):
    with pytest.raises(InvalidRequest):
        engine.find_matches(make_request(pickup=GeoPoint(float("nan"), 3.0)), lagos_pool)


def test_malformed_agent_fails_fast(engine, make_agent, make_request):
    bad = replace(make_agent(), location=GeoPoint(200.0, 3.0))
    with pytest.raises(InvalidRequest):
        engine.find_matches(make_request(), [bad])


# ---------- assign


def test_assign_picks_best(engine, lagos_pool, make_request):
    req = make_request()
    best = engine.find_matches(req, lagos_pool)[0]
    result = engine.assign(req, lagos_pool)
    assert result.agent == best.agent
    assert result.delivery_cost == best.delivery_cost
    assert result.confidence == best.confidence
    assert result.estimated_pickup == best.route.pickup_time
    assert result.estimated_delivery == best.route.delivery_time
    assert result.tracking_id == tracking_id_for(req.order_id, best.agent.id)


def test_assign_is_repeatable(engine, lagos_pool, make_request):
    assert engine.assign(make_request(), lagos_pool) == engine.assign(make_request(), lagos_pool)


def test_tracking_ids_differ_per_order():
    assert tracking_id_for("o-1", "a") != tracking_id_for("o-2", "a")
    assert tracking_id_for("o-1", "a").startswith("TRK-")


# ---------- estimate


def test_estimate_averages_all_eligible(engine, lagos_pool, make_request):
    req = make_request()
    matches = engine.find_matches(req, lagos_pool)
    est = engine.estimate(req.pickup, req.dropoff, req.items, agents=lagos_pool)
    assert est.available_agents == 2
    assert est.estimated_time_min == 20  # (15 + 25) / 2
    mean_cost = sum(m.delivery_cost for m in matches) / len(matches)
    assert est.estimated_cost == round_half_up(mean_cost, 2)


def test_estimate_counts_beyond_top_n(now, make_agent, make_request):
    eng = MatchEngine(clock=FixedClock(now), top_n=1)
    pool = [make_agent(f"a{i}") for i in range(3)]
    req = make_request()
    assert eng.estimate(req.pickup, req.dropoff, req.items, agents=pool).available_agents == 3


def test_estimate_without_agents(engine, make_request):
    req = make_request()
    with pytest.raises(NoAvailableAgents):
        engine.estimate(req.pickup, req.dropoff, req.items, "express", agents=[])


def test_estimate_rejects_unknown_priority(engine, lagos_pool, make_request):
    req = make_request()
    with pytest.raises(InvalidRequest):
        engine.estimate(req.pickup, req.dropoff, req.items, "overnight", agents=lagos_pool)


@pytest.mark.parametrize(
    "bad",
    [
        {"capacity_kg": float("nan")},
        {"capacity_kg": -5.0},
        {"active": -3, "max_orders": 1},
        {"max_km": -1.0},
    ],
)
def test_malformed_agent_fails_the_call(engine, make_agent, make_request, bad):
    items = [DeliveryItem(id="crate", name="crate", weight_kg=500.0)]
    pool = [make_agent("ok"), make_agent("bad", **bad)]
    with pytest.raises(InvalidRequest, match="'bad'"):
        engine.find_matches(make_request(items=items), pool)
    with pytest.raises(InvalidRequest):
        engine.assign(make_request(), pool)


@pytest.mark.parametrize("limit", [0, -1])
def test_limit_below_one_rejected(engine, make_agent, make_request, limit):
    pool = [make_agent(f"a{i}") for i in range(3)]
    with pytest.raises(ValueError, match="limit"):
        engine.find_matches(make_request(), pool, limit=limit)


def test_explicit_limit_caps_results(engine, make_agent, make_request):
    pool = [make_agent(f"a{i}") for i in range(8)]
    assert [m.agent.id for m in engine.find_matches(make_request(), pool, limit=2)] == ["a0", "a1"]
    assert len(engine.find_matches(make_request(), pool, limit=None)) == 5
