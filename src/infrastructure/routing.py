"""
OSRM routing client (driving profile).

Waypoints are sent as ``lng,lat;lng,lat``.  A response counts as a success
only when ``code == "Ok"`` and at least one route is returned; the shortest
route wins.  Anything else is reported as ``None`` so the caller can fall
back to the straight-line estimate.
"""

from __future__ import annotations

import logging
import math
import time
from typing import Optional

import httpx

from src.domain.distance import round_km
from src.domain.entities import Coordinate, DistanceResult

logger = logging.getLogger(__name__)


def duration_label(seconds: float) -> str:
    return f"{round(seconds / 60)} mins"


class OsrmRouter:
    name = "osrm"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "https://router.project-osrm.org/route/v1/driving",
    ):
        self.client = client
        self.base_url = base_url.rstrip("/")

    async def route(
        self, origin: Coordinate, destination: Coordinate
    ) -> Optional[DistanceResult]:
        started = time.perf_counter()
        url = f"{self.base_url}/{origin.lng},{origin.lat};{destination.lng},{destination.lat}"
        params = {"overview": "false", "steps": "false"}
        try:
            resp = await self.client.get(url, params=params)
            resp.raise_for_status()
            data = resp.json()
            if data.get("code") != "Ok":
                logger.warning("OSRM route rejected: %s", data.get("message") or data.get("code"))
                return None
            routes = data.get("routes") or []
            if not routes:
                return None
            best = min(routes, key=lambda r: float(r["distance"]))
            distance_km = float(best["distance"]) / 1000.0
            duration = float(best.get("duration", 0.0))
        except httpx.HTTPError as exc:
            logger.warning("OSRM route fetch failed: %s", exc)
            return None
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            logger.warning("OSRM route payload unusable: %s", exc)
            return None

        if not math.isfinite(distance_km) or distance_km < 0:
            logger.warning("OSRM returned unusable distance %r", distance_km)
            return None

        result = DistanceResult(
            distance_km=round_km(distance_km),
            duration_label=duration_label(duration) if math.isfinite(duration) else None,
        )
        logger.debug(
            "OSRM route origin=(%.4f,%.4f) dest=(%.4f,%.4f) distance=%.1fkm latency=%.1fms",
            origin.lat,
            origin.lng,
            destination.lat,
            destination.lng,
            result.distance_km,
            (time.perf_counter() - started) * 1000,
        )
        return result
