from datetime import datetime
from math import isfinite
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator, model_validator

PRIORITY_KEYS = ("standard", "express", "urgent")
VEHICLE_KEYS = ("bike", "scooter", "car", "van")


class LogModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    debug: bool = False  # emit per-agent rejection records
    record_events: bool = True


# ----------------- PRICING ---------------------


class PricingModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)
    base_fee: float = 3.99
    per_km_fee: float = 0.5
    per_minute_fee: float = 0.1
    priority_multiplier: dict[str, float] = Field(
        default_factory=lambda: {"standard": 1.0, "express": 1.5, "urgent": 2.0}
    )
    vehicle_multiplier: dict[str, float] = Field(
        default_factory=lambda: {"bike": 0.8, "scooter": 1.0, "car": 1.2, "van": 1.5}
    )

    @field_validator("base_fee", "per_km_fee", "per_minute_fee")
    @classmethod
    def _nonneg(cls, v: float, info: ValidationInfo) -> float:
        if not isfinite(v) or v < 0:
            raise ValueError(f"{info.field_name} must be a finite value >= 0")
        return v

    @model_validator(mode="after")
    def _check_tables(self):
        for name, table, keys in (
            ("priority_multiplier", self.priority_multiplier, PRIORITY_KEYS),
            ("vehicle_multiplier", self.vehicle_multiplier, VEHICLE_KEYS),
        ):
            missing = [k for k in keys if k not in table]
            if missing:
                raise ValueError(f"{name} is missing entries for {missing}")
            if any((not isfinite(v)) or v <= 0 for v in table.values()):
                raise ValueError(f"{name} values must be finite and > 0")
        return self


# ------------------ TRAVEL TIME -----------------------------


class TravelTimeVehicleSpeedModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["vehicle_speed"] = "vehicle_speed"
    speeds_kmh: dict[str, float] = Field(
        default_factory=lambda: {"bike": 15.0, "scooter": 25.0, "car": 30.0, "van": 25.0}
    )
    min_buffer_min: float = 5.0  # stops and traffic
    buffer_fraction: float = 0.2

    @model_validator(mode="after")
    def _check_speeds(self):
        missing = [k for k in VEHICLE_KEYS if k not in self.speeds_kmh]
        if missing:
            raise ValueError(f"speeds_kmh is missing entries for {missing}")
        if any((not isfinite(v)) or v <= 0 for v in self.speeds_kmh.values()):
            raise ValueError("speeds_kmh values must be finite and > 0")
        return self


class TravelTimeFixedModel(BaseModel):
    """Test stub with fixed durations."""

    model_config = ConfigDict(extra="forbid")
    kind: Literal["fixed"] = "fixed"
    minutes: int = 10

    @field_validator("minutes")
    def _nonneg(cls, v: int, info: ValidationInfo) -> int:
        if v < 0:
            raise ValueError(f"{info.field_name} must be >= 0")
        return v


TravelTimeUnion = Annotated[
    TravelTimeVehicleSpeedModel | TravelTimeFixedModel, Field(discriminator="kind")
]


# ------------------ CLOCK -----------------------------


class ClockSystemModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["system"] = "system"
    tz: str | None = None  # IANA name; None => host local time


class ClockFixedModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    kind: Literal["fixed"] = "fixed"
    at: datetime


ClockUnion = Annotated[ClockSystemModel | ClockFixedModel, Field(discriminator="kind")]


# ------------------ POLICIES -----------------------------


class EligibilityModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    require_online: bool = True
    require_capacity: bool = True
    check_weight: bool = True
    check_area: bool = True
    check_distance: bool = True
    check_working_hours: bool = True
    working_hours_tz: str | None = None  # None => hour of `now` as given


class ScoringModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    base: float = 100.0
    distance_penalty_per_km: float = 2.0
    distance_penalty_cap: float = 30.0
    rating_pivot: float = 3.0
    rating_weight: float = 10.0
    completion_pivot: float = 80.0
    completion_weight: float = 0.5
    load_penalty: float = 20.0
    fragile_bonus: float = 10.0
    perishable_bonus: float = 5.0
    high_threshold: float = 80.0
    medium_threshold: float = 60.0

    @model_validator(mode="after")
    def _check_thresholds(self):
        if self.medium_threshold > self.high_threshold:
            raise ValueError("medium_threshold must not exceed high_threshold")
        return self


class MatchingModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    top_n: int = Field(default=5, ge=1)


# ------------------------------------------------------------------


class EngineModel(BaseModel):
    model_config = ConfigDict(extra="forbid")
    name: str = "default"
    log: LogModel = LogModel()
    pricing: PricingModel = Field(default_factory=PricingModel)
    travel_time: TravelTimeUnion = Field(default_factory=TravelTimeVehicleSpeedModel)
    clock: ClockUnion = Field(default_factory=ClockSystemModel)
    eligibility: EligibilityModel = Field(default_factory=EligibilityModel)
    scoring: ScoringModel = Field(default_factory=ScoringModel)
    matching: MatchingModel = Field(default_factory=MatchingModel)
