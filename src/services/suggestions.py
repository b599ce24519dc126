"""Address autocomplete: admin-managed custom locations first, then Nominatim."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.addresses import normalize_address
from src.domain.entities import Coordinate, Suggestion
from src.infrastructure.geocoding import NominatimGeocodingProvider
from src.infrastructure.repositories import CustomLocationRepository

MIN_CUSTOM_QUERY = 2
MIN_PROVIDER_QUERY = 3


async def custom_suggestions(session: AsyncSession, query: str) -> list[Suggestion]:
    query = query.strip()
    if len(query) < MIN_CUSTOM_QUERY:
        return []
    rows = await CustomLocationRepository(session).search_active(query)
    return [
        Suggestion(
            label=row.name,
            coordinate=Coordinate(row.latitude, row.longitude),
            is_custom=True,
        )
        for row in rows
    ]


async def suggest(
    session: AsyncSession,
    provider: NominatimGeocodingProvider,
    query: str,
    limit: int = 5,
) -> list[Suggestion]:
    results = await custom_suggestions(session, query)
    normalized = normalize_address(query)
    if len(normalized) >= MIN_PROVIDER_QUERY:
        results.extend(await provider.search(normalized, limit=limit))
    return results
