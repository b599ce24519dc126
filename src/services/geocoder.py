"""
Geocoder  (Chain of Responsibility)
===================================

Resolution order for a free-text address:

1. Empty input               -> not found, no network call.
2. ``"lat,lng"`` literal     -> that coordinate, no network call.
3. Normalize, build variants (as typed, + country, + region).
4. For each provider in order (Google when a key is configured, then
   Nominatim) try every variant once; the first coordinate wins.

``geocode`` returns ``None`` when nothing resolves.  "Address not found" is
a normal terminal outcome, never an exception.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from src.config import Settings, settings as default_settings
from src.domain.addresses import (
    address_variants,
    normalize_address,
    parse_coordinate_literal,
)
from src.domain.entities import Coordinate
from src.infrastructure.geocoding import (
    GeocodingProvider,
    GoogleGeocodingProvider,
    NominatimGeocodingProvider,
)

logger = logging.getLogger(__name__)


class Geocoder:
    def __init__(
        self,
        providers: list[GeocodingProvider],
        suffixes: Optional[list[str]] = None,
    ):
        self.providers = providers
        self.suffixes = suffixes or []

    async def geocode(self, address: str) -> Optional[Coordinate]:
        if not address or not address.strip():
            return None

        literal = parse_coordinate_literal(address)
        if literal is not None:
            return literal

        variants = address_variants(normalize_address(address), self.suffixes)
        for provider in self.providers:
            for variant in variants:
                coordinate = await provider.lookup(variant)
                if coordinate is not None:
                    logger.debug(
                        "Geocoded %r via %s (variant %r)", address, provider.name, variant
                    )
                    return coordinate

        logger.info("Address not found after %d variant(s): %r", len(variants), address)
        return None


def build_providers(
    client: httpx.AsyncClient, config: Settings = default_settings
) -> tuple[list[GeocodingProvider], NominatimGeocodingProvider]:
    """Provider chain for ``config``; the Nominatim adapter is also returned
    on its own because suggestions and reverse look-ups use it directly."""
    nominatim = NominatimGeocodingProvider(
        client,
        base_url=config.nominatim_base_url,
        user_agent=config.nominatim_user_agent,
        country_code=config.geocode_country_code,
    )
    providers: list[GeocodingProvider] = []
    if config.google_maps_api_key:
        providers.append(
            GoogleGeocodingProvider(
                client,
                api_key=config.google_maps_api_key,
                url=config.google_geocode_url,
                region=config.google_region,
            )
        )
    providers.append(nominatim)
    return providers, nominatim


def build_geocoder(
    providers: list[GeocodingProvider], config: Settings = default_settings
) -> Geocoder:
    return Geocoder(
        providers,
        suffixes=[config.geocode_country_suffix, config.geocode_region_suffix],
    )
