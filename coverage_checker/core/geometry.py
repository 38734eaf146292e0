"""
Geospatial helpers for the bounding-box fan-out.

Boxes are squares in degree space centred on a point. Rings are square
annuli of boxes around the search centre; each ring is sampled at its
corners and edge midpoints only.
"""
import math
from dataclasses import dataclass
from typing import List, Tuple


# Earth's radius in meters (mean radius)
EARTH_RADIUS_M = 6371000.0

# Number of boxes sampled on every ring beyond the centre
BOXES_PER_RING = 8


def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Calculate great-circle distance between two points using Haversine formula.

    Args:
        lat1: Latitude of first point (decimal degrees)
        lon1: Longitude of first point (decimal degrees)
        lat2: Latitude of second point (decimal degrees)
        lon2: Longitude of second point (decimal degrees)

    Returns:
        Distance in meters

    Example:
        >>> # One ring step north of Cambridge, MA
        >>> round(haversine_distance(42.3626, -71.0843, 42.3706, -71.0843))
        890
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    dlat = lat2_rad - lat1_rad
    dlon = math.radians(lon2) - math.radians(lon1)

    a = (math.sin(dlat / 2)) ** 2 + \
        math.cos(lat1_rad) * math.cos(lat2_rad) * (math.sin(dlon / 2)) ** 2

    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_M * c


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned box in decimal degrees."""
    min_lat: float
    min_lon: float
    max_lat: float
    max_lon: float

    @classmethod
    def around(cls, lat: float, lon: float, half_width: float) -> 'BoundingBox':
        """Square box of side 2*half_width centred on (lat, lon)."""
        if half_width <= 0:
            raise ValueError(f"half_width must be positive, got {half_width}")
        return cls(
            min_lat=lat - half_width,
            min_lon=lon - half_width,
            max_lat=lat + half_width,
            max_lon=lon + half_width,
        )

    @property
    def half_width(self) -> float:
        return (self.max_lat - self.min_lat) / 2

    def to_param(self) -> str:
        """Provider BBOX parameter: 'minLat,minLon,maxLat,maxLon' with 6 decimals."""
        return (
            f"{self.min_lat:.6f},{self.min_lon:.6f},"
            f"{self.max_lat:.6f},{self.max_lon:.6f}"
        )


def ring_offsets(ring: int, step: float) -> List[Tuple[float, float]]:
    """
    Centre offsets (dlat, dlon) of the boxes sampled on one ring.

    Ring 0 is the centre box. Ring r >= 1 yields the 8 corners and edge
    midpoints of the square at distance r*step, so every ring costs the same
    number of requests.

    Example:
        >>> ring_offsets(0, 0.008)
        [(0.0, 0.0)]
        >>> len(ring_offsets(3, 0.008))
        8
    """
    if ring < 0:
        raise ValueError(f"ring must be >= 0, got {ring}")
    if ring == 0:
        return [(0.0, 0.0)]

    values = (-ring, 0, ring)
    offsets = []
    for dy in values:
        for dx in values:
            if dy == 0 and dx == 0:
                continue
            offsets.append((dy * step, dx * step))
    return offsets


def ring_reach_m(lat: float, lon: float, ring: int, step: float) -> float:
    """Approximate north-south distance covered out to the edge of ``ring``."""
    edge = ring * step + step
    return haversine_distance(lat, lon, lat + edge, lon)
