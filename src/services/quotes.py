"""
Delivery quote composition
==========================

Geocoder(pickup), Geocoder(dropoff) -> RoadDistanceEstimator -> calculate_fee

* A location is either free text or a ``Coordinate`` picked on the map.
* The pickup defaults to the hub (food orders are delivered from there).
* If either end cannot be geocoded the quote carries no distance, charges
  the base fee and names the missing end(s) in ``not_found``.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Optional, Union

from src.domain.entities import (
    Coordinate,
    DeliveryFeeConfig,
    DistanceResult,
    HubLocation,
)
from src.domain.enums import ServiceLine
from src.domain.pricing import calculate_fee
from src.services.geocoder import Geocoder
from src.services.road_distance import RoadDistanceEstimator

logger = logging.getLogger(__name__)

Location = Union[str, Coordinate]


@dataclass(frozen=True)
class Quote:
    service: ServiceLine
    pickup: Optional[Coordinate]
    dropoff: Optional[Coordinate]
    distance: Optional[DistanceResult]
    fee: float
    not_found: tuple[str, ...] = ()

    @property
    def base_fee_applied(self) -> bool:
        return self.distance is None


class DeliveryQuoter:
    def __init__(
        self,
        geocoder: Geocoder,
        estimator: RoadDistanceEstimator,
        hub: HubLocation,
    ):
        self.geocoder = geocoder
        self.estimator = estimator
        self.hub = hub

    async def resolve(self, location: Location) -> Optional[Coordinate]:
        if isinstance(location, Coordinate):
            return location
        return await self.geocoder.geocode(location)

    async def quote(
        self,
        service: ServiceLine,
        config: DeliveryFeeConfig,
        dropoff: Location,
        pickup: Optional[Location] = None,
    ) -> Quote:
        origin = pickup if pickup is not None else self.hub.coordinate
        pickup_coords, dropoff_coords = await asyncio.gather(
            self.resolve(origin), self.resolve(dropoff)
        )

        not_found = tuple(
            name
            for name, coords in (("pickup", pickup_coords), ("dropoff", dropoff_coords))
            if coords is None
        )
        if not_found:
            logger.info("Quote for %s without distance, not found: %s", service.value, not_found)
            return Quote(
                service=service,
                pickup=pickup_coords,
                dropoff=dropoff_coords,
                distance=None,
                fee=calculate_fee(None, config),
                not_found=not_found,
            )

        distance = await self.estimator.estimate(pickup_coords, dropoff_coords)
        return Quote(
            service=service,
            pickup=pickup_coords,
            dropoff=dropoff_coords,
            distance=distance,
            fee=calculate_fee(distance.distance_km, config),
        )
