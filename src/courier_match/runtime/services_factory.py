# courier_match/runtime/services_factory.py
from courier_match.app.protocols import TravelTimeService
from courier_match.config.models import (
    ClockFixedModel,
    ClockSystemModel,
    ClockUnion,
    TravelTimeFixedModel,
    TravelTimeUnion,
    TravelTimeVehicleSpeedModel,
)
from courier_match.runtime.clock import Clock, FixedClock, SystemClock
from courier_match.services.travel_time import FixedDurationTravelTime, VehicleSpeedTravelTime


def make_travel_time(cfg: TravelTimeUnion) -> TravelTimeService:
    if isinstance(cfg, TravelTimeVehicleSpeedModel):
        return VehicleSpeedTravelTime(
            speeds_kmh=cfg.speeds_kmh,
            min_buffer_min=cfg.min_buffer_min,
            buffer_fraction=cfg.buffer_fraction,
        )
    elif isinstance(cfg, TravelTimeFixedModel):
        return FixedDurationTravelTime(minutes=cfg.minutes)
    else:
        raise TypeError(cfg)


def make_clock(cfg: ClockUnion) -> Clock:
    if isinstance(cfg, ClockSystemModel):
        return SystemClock(tz=cfg.tz)
    elif isinstance(cfg, ClockFixedModel):
        return FixedClock(cfg.at)
    else:
        raise TypeError(cfg)
