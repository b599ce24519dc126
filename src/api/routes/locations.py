"""
Location endpoints
==================

GET /api/v1/locations/suggest?q=         -- autocomplete suggestions
GET /api/v1/locations/reverse?lat=&lng=  -- address for a map point
WS  /api/v1/locations/track              -- live address field

``/track`` runs one ``AddressFieldWorker`` per connection.  Every text
frame is an edit of the field; once the field settles the server pushes an
``AddressFieldResult`` (RESOLVED with a location, or FAILED).  Superseded
edits never produce a message.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from fastapi import (
    APIRouter,
    Depends,
    HTTPException,
    Query,
    Request,
    WebSocket,
    WebSocketDisconnect,
)
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, get_nominatim, get_ws_geocoder
from src.api.middleware import limiter
from src.api.schemas import (
    AddressFieldResult,
    CoordinateSchema,
    ReverseGeocodeResponse,
    SuggestionResponse,
)
from src.config import settings
from src.domain.entities import Coordinate
from src.domain.enums import FieldState
from src.infrastructure.geocoding import NominatimGeocodingProvider
from src.services.geocoder import Geocoder
from src.services.suggestions import suggest
from src.workers.address_field import AddressFieldWorker

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/locations", tags=["locations"])


@router.get(
    "/suggest",
    response_model=list[SuggestionResponse],
    summary="Address suggestions (custom locations first)",
)
@limiter.limit("100/minute")
async def suggest_locations(
    request: Request,
    q: str = Query(..., max_length=200),
    db: AsyncSession = Depends(get_db),
    nominatim: NominatimGeocodingProvider = Depends(get_nominatim),
):
    suggestions = await suggest(db, nominatim, q, limit=settings.suggestion_limit)
    return [
        SuggestionResponse(
            label=s.label,
            location=CoordinateSchema.from_domain(s.coordinate),
            is_custom=s.is_custom,
        )
        for s in suggestions
    ]


@router.get(
    "/reverse",
    response_model=ReverseGeocodeResponse,
    summary="Reverse-geocode a map point",
    responses={404: {"description": "No address found for this point."}},
)
@limiter.limit("100/minute")
async def reverse_geocode(
    request: Request,
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    nominatim: NominatimGeocodingProvider = Depends(get_nominatim),
):
    coordinate = Coordinate(lat, lng)
    label = await nominatim.reverse(coordinate)
    if not label:
        raise HTTPException(status_code=404, detail="Address not found")
    return ReverseGeocodeResponse(
        label=label, location=CoordinateSchema.from_domain(coordinate)
    )


# ── Live address field ────────────────────────────────────────────────


async def _push_results(websocket: WebSocket, results: asyncio.Queue) -> None:
    while True:
        result: AddressFieldResult = await results.get()
        await websocket.send_json(result.model_dump(mode="json"))


@router.websocket("/track")
async def track_address(
    websocket: WebSocket,
    geocoder: Geocoder = Depends(get_ws_geocoder),
):
    await websocket.accept()
    results: asyncio.Queue = asyncio.Queue()

    def on_result(text: str, coordinate: Optional[Coordinate]) -> None:
        results.put_nowait(
            AddressFieldResult(
                text=text,
                state=FieldState.RESOLVED if coordinate else FieldState.FAILED,
                location=CoordinateSchema.from_domain(coordinate),
            )
        )

    worker = AddressFieldWorker(
        geocoder.geocode,
        debounce_seconds=websocket.app.state.address_debounce_seconds,
        on_result=on_result,
    )
    pusher = asyncio.create_task(_push_results(websocket, results))
    try:
        while True:
            worker.edit(await websocket.receive_text())
    except WebSocketDisconnect:
        logger.debug("Address field connection closed")
    finally:
        await worker.close()
        pusher.cancel()
