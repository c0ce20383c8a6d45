from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional

EARTH_RADIUS_METERS = 6371e3


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance (haversine)."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return EARTH_RADIUS_METERS * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


@dataclass(frozen=True)
class Kiosk:
    kiosk_id: str
    name: str
    product_line: str
    latitude: float
    longitude: float
    # overrides the policy's default radius when set
    radius_override_meters: Optional[int] = None
    is_active: bool = True

    def allowed_radius(self, default_radius_meters: int) -> int:
        return self.radius_override_meters or default_radius_meters

    def distance_to(self, latitude: float, longitude: float) -> float:
        return distance_meters(latitude, longitude, self.latitude, self.longitude)
