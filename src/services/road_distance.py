"""
Road-distance estimation with a straight-line fallback.

The routing service is asked first.  When it is unreachable, answers with
anything but ``"Ok"`` or returns no routes, the great-circle distance times
the road-indirection factor is used instead.  ``estimate`` always returns a
``DistanceResult``; the fallback carries no duration.
"""

from __future__ import annotations

import logging
from typing import Optional

from src.domain.distance import ROAD_INDIRECTION_FACTOR, straight_line_estimate
from src.domain.entities import Coordinate, DistanceResult
from src.infrastructure.routing import OsrmRouter

logger = logging.getLogger(__name__)


class RoadDistanceEstimator:
    def __init__(
        self,
        router: Optional[OsrmRouter],
        indirection_factor: float = ROAD_INDIRECTION_FACTOR,
    ):
        self.router = router
        self.indirection_factor = indirection_factor

    async def estimate(
        self, origin: Coordinate, destination: Coordinate
    ) -> DistanceResult:
        if origin == destination:
            return DistanceResult(distance_km=0.0)

        if self.router is not None:
            result = await self.router.route(origin, destination)
            if result is not None:
                return result

        logger.info(
            "Routing unavailable, using straight-line x%.1f for (%.4f,%.4f)->(%.4f,%.4f)",
            self.indirection_factor,
            origin.lat,
            origin.lng,
            destination.lat,
            destination.lng,
        )
        return straight_line_estimate(origin, destination, self.indirection_factor)
