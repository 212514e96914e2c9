"""
Geographic helpers: bounding boxes and region classification.

Regions are a coarse heuristic. Each region is a hand-tuned latitude /
longitude rectangle and the rectangles overlap, so classification walks
REGION_BOXES in order and the first box containing the point wins.
Keep it an ordered list: the order is the tie-break rule.
"""

import math
from dataclasses import dataclass
from typing import Optional, List, Tuple

from skyboard.models.airline import Region


def cos_deg(degrees: float) -> float:
    """Cosine of angle in degrees."""
    return math.cos(math.radians(degrees))


@dataclass(frozen=True)
class GeoBox:
    """
    Geographic bounding box, bounds inclusive.

    OpenSky expects: lamin, lomin, lamax, lomax
    (latitude min, longitude min, latitude max, longitude max)
    """
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    @classmethod
    def from_center_radius(
        cls,
        center_lat: float,
        center_lon: float,
        radius_km: float
    ) -> 'GeoBox':
        """
        Create bounding box from center point and radius.

        Uses approximate conversion: 1 degree ~ 111 km at equator.
        Adjusts for latitude to account for longitude convergence.
        """
        lat_delta = radius_km / 111.0
        lon_delta = radius_km / (111.0 * max(abs(cos_deg(center_lat)), 1e-6))

        return cls(
            lat_min=center_lat - lat_delta,
            lat_max=center_lat + lat_delta,
            lon_min=center_lon - lon_delta,
            lon_max=center_lon + lon_delta,
        )

    def contains(self, latitude: float, longitude: float) -> bool:
        return (
            self.lat_min <= latitude <= self.lat_max and
            self.lon_min <= longitude <= self.lon_max
        )

    def to_params(self) -> dict:
        """Convert to OpenSky API query parameters."""
        return {
            'lamin': self.lat_min,
            'lamax': self.lat_max,
            'lomin': self.lon_min,
            'lomax': self.lon_max,
        }


# Tested in this order. Europe/Africa share the 35N band and
# Europe/Asia/Africa overlap in longitude; earlier entries win.
REGION_BOXES: List[Tuple[GeoBox, Region]] = [
    (GeoBox(lat_min=35, lat_max=70, lon_min=-25, lon_max=40), Region.EUROPE),
    (GeoBox(lat_min=10, lat_max=60, lon_min=60, lon_max=180), Region.ASIA),
    (GeoBox(lat_min=10, lat_max=70, lon_min=-180, lon_max=-50), Region.AMERICAS),
    (GeoBox(lat_min=-35, lat_max=35, lon_min=-20, lon_max=55), Region.AFRICA),
    (GeoBox(lat_min=-50, lat_max=-10, lon_min=110, lon_max=180), Region.OCEANIA),
]


def classify_region(latitude: Optional[float], longitude: Optional[float]) -> Region:
    """
    Classify a coordinate into a region.

    Missing coordinates and points outside every box are UNCLASSIFIED.
    """
    if latitude is None or longitude is None:
        return Region.UNCLASSIFIED
    if math.isnan(latitude) or math.isnan(longitude):
        return Region.UNCLASSIFIED

    for box, region in REGION_BOXES:
        if box.contains(latitude, longitude):
            return region

    return Region.UNCLASSIFIED
