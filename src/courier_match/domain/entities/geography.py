# domain/entities/geography.py
from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    latitude: float  # degrees
    longitude: float  # degrees
    address: str = ""
    city: str = ""
    state: str = ""
    postal_code: str = ""

    @property
    def coords(self) -> tuple[float, float]:
        return self.latitude, self.longitude
