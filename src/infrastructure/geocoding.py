"""
Geocoding provider adapters  (Strategy Pattern)
===============================================

* ``GoogleGeocodingProvider``    -- keyed; success when ``status == "OK"``
  and ``results[0].geometry.location`` is present.
* ``NominatimGeocodingProvider`` -- keyless OpenStreetMap service; requires
  a ``User-Agent`` header, answers with a JSON array whose elements carry
  string-encoded ``lat`` / ``lon``.

Every lookup makes a single attempt.  Transport failures, timeouts, non-2xx
responses and malformed payloads are logged and reported as ``None``; an
adapter never raises for provider trouble.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from src.domain.entities import Coordinate, Suggestion

logger = logging.getLogger(__name__)

PAYLOAD_ERRORS = (ValueError, KeyError, TypeError, IndexError, AttributeError)


class GeocodingProvider(ABC):
    name: str = "provider"

    @abstractmethod
    async def lookup(self, query: str) -> Optional[Coordinate]: ...


class GoogleGeocodingProvider(GeocodingProvider):
    name = "google"

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        url: str = "https://maps.googleapis.com/maps/api/geocode/json",
        region: str = "ph",
    ):
        self.client = client
        self.api_key = api_key
        self.url = url
        self.region = region

    async def lookup(self, query: str) -> Optional[Coordinate]:
        params = {"address": query, "key": self.api_key, "region": self.region}
        try:
            resp = await self.client.get(self.url, params=params)
            resp.raise_for_status()
            data = resp.json()
            if data.get("status") != "OK" or not data.get("results"):
                return None
            location = data["results"][0]["geometry"]["location"]
            return Coordinate(float(location["lat"]), float(location["lng"]))
        except httpx.HTTPError as exc:
            logger.warning("Google geocoding request failed: %s", exc)
        except PAYLOAD_ERRORS as exc:
            logger.warning("Google geocoding payload unusable: %s", exc)
        return None


class NominatimGeocodingProvider(GeocodingProvider):
    name = "nominatim"

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str = "https://nominatim.openstreetmap.org",
        user_agent: str = "E-Run-Delivery-App",
        country_code: str = "ph",
    ):
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.headers = {"User-Agent": user_agent}
        self.country_code = country_code

    async def _get(self, path: str, params: dict[str, Any]) -> Any:
        resp = await self.client.get(
            f"{self.base_url}/{path}", params=params, headers=self.headers
        )
        resp.raise_for_status()
        return resp.json()

    async def lookup(self, query: str) -> Optional[Coordinate]:
        params = {
            "format": "json",
            "q": query,
            "limit": 1,
            "countrycodes": self.country_code,
        }
        try:
            data = await self._get("search", params)
            if not data:
                return None
            return Coordinate(float(data[0]["lat"]), float(data[0]["lon"]))
        except httpx.HTTPError as exc:
            logger.warning("Nominatim geocoding request failed: %s", exc)
        except PAYLOAD_ERRORS as exc:
            logger.warning("Nominatim geocoding payload unusable: %s", exc)
        return None

    async def search(self, query: str, limit: int = 5) -> list[Suggestion]:
        """Labelled candidates for autocomplete; empty list on any failure."""
        params = {
            "format": "json",
            "q": query,
            "limit": limit,
            "countrycodes": self.country_code,
            "addressdetails": 1,
        }
        try:
            data = await self._get("search", params)
            return [
                Suggestion(
                    label=item["display_name"],
                    coordinate=Coordinate(float(item["lat"]), float(item["lon"])),
                )
                for item in data
            ]
        except httpx.HTTPError as exc:
            logger.warning("Nominatim search request failed: %s", exc)
        except PAYLOAD_ERRORS as exc:
            logger.warning("Nominatim search payload unusable: %s", exc)
        return []

    async def reverse(self, coordinate: Coordinate) -> Optional[str]:
        params = {
            "format": "json",
            "lat": coordinate.lat,
            "lon": coordinate.lng,
            "zoom": 18,
            "addressdetails": 1,
        }
        try:
            data = await self._get("reverse", params)
            return data.get("display_name") or None
        except httpx.HTTPError as exc:
            logger.warning("Nominatim reverse request failed: %s", exc)
        except PAYLOAD_ERRORS as exc:
            logger.warning("Nominatim reverse payload unusable: %s", exc)
        return None
