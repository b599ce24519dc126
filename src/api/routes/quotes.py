"""
Quote endpoints
===============

POST /api/v1/quotes                -- delivery fee for pickup -> drop-off
POST /api/v1/delivery-area/check   -- is an address inside the delivery radius
GET  /api/v1/hub                   -- delivery hub and radius
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, get_fee_cache, get_geocoder, get_quoter
from src.api.middleware import limiter
from src.api.schemas import (
    AreaCheckRequest,
    AreaCheckResponse,
    CoordinateSchema,
    HubResponse,
    QuoteRequest,
    QuoteResponse,
)
from src.config import settings
from src.services.delivery_area import is_within_area
from src.services.fee_config import FeeConfigCache, FeeConfigStore
from src.services.geocoder import Geocoder
from src.services.quotes import DeliveryQuoter

router = APIRouter(tags=["quotes"])


@router.post(
    "/quotes",
    response_model=QuoteResponse,
    summary="Quote a delivery fee",
    description=(
        "Geocodes both ends, estimates the road distance (straight-line x 1.2 "
        "when routing is unavailable) and applies the service line's fee. "
        "When an address cannot be found the base fee is quoted."
    ),
)
@limiter.limit("100/minute")
async def create_quote(
    request: Request,
    body: QuoteRequest,
    db: AsyncSession = Depends(get_db),
    quoter: DeliveryQuoter = Depends(get_quoter),
    fee_cache: FeeConfigCache = Depends(get_fee_cache),
):
    config = await fee_cache.get(body.service, FeeConfigStore(db))
    quote = await quoter.quote(
        body.service,
        config,
        dropoff=body.dropoff.to_location(),
        pickup=body.pickup.to_location() if body.pickup else None,
    )
    return QuoteResponse(
        service=quote.service,
        pickup=CoordinateSchema.from_domain(quote.pickup),
        dropoff=CoordinateSchema.from_domain(quote.dropoff),
        distance_km=quote.distance.distance_km if quote.distance else None,
        duration=quote.distance.duration_label if quote.distance else None,
        fee=quote.fee,
        base_fee_applied=quote.base_fee_applied,
        not_found=list(quote.not_found),
    )


@router.post(
    "/delivery-area/check",
    response_model=AreaCheckResponse,
    summary="Check whether an address is inside the delivery area",
)
@limiter.limit("100/minute")
async def check_delivery_area(
    request: Request,
    body: AreaCheckRequest,
    geocoder: Geocoder = Depends(get_geocoder),
    quoter: DeliveryQuoter = Depends(get_quoter),
):
    check = await is_within_area(
        geocoder,
        body.address,
        quoter.hub.coordinate,
        settings.max_delivery_radius_km,
    )
    return AreaCheckResponse(
        within=check.within,
        distance_km=check.distance_km,
        error=check.error,
        radius_km=settings.max_delivery_radius_km,
    )


@router.get("/hub", response_model=HubResponse, summary="Delivery hub")
async def get_hub(quoter: DeliveryQuoter = Depends(get_quoter)):
    return HubResponse(
        label=quoter.hub.label,
        location=CoordinateSchema.from_domain(quoter.hub.coordinate),
        radius_km=settings.max_delivery_radius_km,
    )
