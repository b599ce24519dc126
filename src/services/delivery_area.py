"""
Delivery-area gate used at checkout.

The destination is geocoded and compared with the hub by plain great-circle
distance (no road-indirection factor).  It does not depend on
the road distance used for the fee, so the two may disagree.
"""

from __future__ import annotations

from src.domain.distance import distance_between, round_km
from src.domain.entities import AreaCheck, Coordinate
from src.services.geocoder import Geocoder

LOCATION_NOT_FOUND = "location not found"


async def is_within_area(
    geocoder: Geocoder,
    address: str,
    hub: Coordinate,
    radius_km: float,
) -> AreaCheck:
    coordinate = await geocoder.geocode(address)
    if coordinate is None:
        return AreaCheck(within=False, error=LOCATION_NOT_FOUND)

    distance = distance_between(hub, coordinate)
    return AreaCheck(within=distance <= radius_km, distance_km=round_km(distance))
