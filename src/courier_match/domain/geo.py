# domain/geo.py
import math
from collections.abc import Sequence

import numpy as np

from courier_match.domain.entities.geography import GeoPoint

EARTH_RADIUS_KM = 6371.0


def haversine_km(a: GeoPoint, b: GeoPoint) -> float:
    """Great-circle distance in km between two points given in degrees."""
    lat1, lat2 = math.radians(a.latitude), math.radians(b.latitude)
    dlat = lat2 - lat1
    dlon = math.radians(b.longitude - a.longitude)
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    h = min(1.0, h)
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def haversine_km_many(origin: GeoPoint, points: Sequence[GeoPoint]) -> np.ndarray:
    """Vectorised `haversine_km(p, origin)` for every p in `points`."""
    if not points:
        return np.zeros(0, dtype=float)
    coords = np.radians(np.array([p.coords for p in points], dtype=float))
    lat1, lon1 = coords[:, 0], coords[:, 1]
    lat2, lon2 = math.radians(origin.latitude), math.radians(origin.longitude)
    h = np.sin((lat2 - lat1) / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin((lon2 - lon1) / 2) ** 2
    h = np.clip(h, 0.0, 1.0)
    return EARTH_RADIUS_KM * 2 * np.arctan2(np.sqrt(h), np.sqrt(1 - h))
