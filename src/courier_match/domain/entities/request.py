# domain/entities/request.py
from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from courier_match.domain.entities.geography import GeoPoint

Priority = Literal["standard", "express", "urgent"]
PRIORITIES: tuple[str, ...] = ("standard", "express", "urgent")


@dataclass(frozen=True)
class Dimensions:
    length: float = 0.0
    width: float = 0.0
    height: float = 0.0


@dataclass(frozen=True)
class DeliveryItem:
    id: str
    name: str
    weight_kg: float
    dimensions: Dimensions = Dimensions()
    fragile: bool = False
    perishable: bool = False


@dataclass(frozen=True)
class DeliveryRequest:
    order_id: str
    customer_id: str
    seller_id: str
    pickup: GeoPoint
    dropoff: GeoPoint
    items: tuple[DeliveryItem, ...] = ()
    priority: Priority = "standard"
    scheduled_pickup: datetime | None = None
    requested_delivery: datetime | None = None
    instructions: str | None = None
    total_value: float = 0.0
    payment_method: str = "card"

    @property
    def total_weight_kg(self) -> float:
        return sum(item.weight_kg for item in self.items)

    @property
    def has_fragile(self) -> bool:
        return any(item.fragile for item in self.items)

    @property
    def has_perishable(self) -> bool:
        return any(item.perishable for item in self.items)
