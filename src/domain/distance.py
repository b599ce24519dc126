"""
Distance calculation using the Haversine formula.

Great-circle distance is used in two places: directly for delivery-area
gating, and inflated by a road-indirection factor as the fallback when the
routing service cannot return a real road distance.

Complexity: O(1) per call.
"""

import math

from .entities import Coordinate, DistanceResult

EARTH_RADIUS_KM = 6_371.0
ROAD_INDIRECTION_FACTOR = 1.2


def haversine_km(
    lat1: float, lng1: float, lat2: float, lng2: float
) -> float:
    """Return the great-circle distance in **km** between two points."""
    lat1_r, lat2_r = math.radians(lat1), math.radians(lat2)
    dlat = math.radians(lat2 - lat1)
    dlng = math.radians(lng2 - lng1)

    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1_r) * math.cos(lat2_r) * math.sin(dlng / 2) ** 2
    )
    # Rounding can push ``a`` a hair past 1.0 for antipodal points
    return 2 * EARTH_RADIUS_KM * math.asin(math.sqrt(min(1.0, max(0.0, a))))


def distance_between(origin: Coordinate, destination: Coordinate) -> float:
    return haversine_km(origin.lat, origin.lng, destination.lat, destination.lng)


def round_km(distance_km: float) -> float:
    """One-decimal rounding, never negative."""
    return max(0.0, round(distance_km, 1))


def straight_line_estimate(
    origin: Coordinate,
    destination: Coordinate,
    factor: float = ROAD_INDIRECTION_FACTOR,
) -> DistanceResult:
    """Approximate road distance as ``factor`` x great-circle distance."""
    return DistanceResult(distance_km=round_km(distance_between(origin, destination) * factor))
