"""FastAPI dependency injection helpers."""

from fastapi import Request, WebSocket
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.database import async_session_factory
from src.infrastructure.geocoding import NominatimGeocodingProvider
from src.services.fee_config import FeeConfigCache
from src.services.geocoder import Geocoder
from src.services.quotes import DeliveryQuoter


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


# Services are built once in the app lifespan and kept on ``app.state``.


def get_geocoder(request: Request) -> Geocoder:
    return request.app.state.geocoder


def get_quoter(request: Request) -> DeliveryQuoter:
    return request.app.state.quoter


def get_nominatim(request: Request) -> NominatimGeocodingProvider:
    return request.app.state.nominatim


def get_fee_cache(request: Request) -> FeeConfigCache:
    return request.app.state.fee_cache


def get_ws_geocoder(websocket: WebSocket) -> Geocoder:
    return websocket.app.state.geocoder
