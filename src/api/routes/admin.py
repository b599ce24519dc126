"""
Admin endpoints
===============

GET    /api/v1/admin/delivery-fees             -- fee settings per service line
PUT    /api/v1/admin/delivery-fees/{service}   -- save one service line's fees
POST   /api/v1/admin/delivery-fees/reload      -- re-read fees from the store
GET    /api/v1/admin/locations                 -- list custom locations
POST   /api/v1/admin/locations                 -- add a custom location
PATCH  /api/v1/admin/locations/{location_id}   -- edit a custom location
DELETE /api/v1/admin/locations/{location_id}   -- remove a custom location
GET    /api/v1/admin/health                    -- simple health check
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.api.dependencies import get_db, get_fee_cache
from src.api.middleware import limiter
from src.api.schemas import (
    CustomLocationCreate,
    CustomLocationResponse,
    CustomLocationUpdate,
    FeeConfigResponse,
    FeeConfigUpdate,
    HealthResponse,
)
from src.domain.entities import DeliveryFeeConfig
from src.domain.enums import ServiceLine
from src.infrastructure.repositories import CustomLocationRepository
from src.services.fee_config import FeeConfigCache, FeeConfigStore

router = APIRouter(prefix="/admin", tags=["admin"])


def _fee_response(service: ServiceLine, config: DeliveryFeeConfig) -> FeeConfigResponse:
    return FeeConfigResponse(
        service=service,
        base_fee=config.base_fee,
        per_km_fee=config.per_km_fee,
        base_distance_km=config.base_distance_km,
    )


# ── Delivery fees ─────────────────────────────────────────────────────


@router.get(
    "/delivery-fees",
    response_model=list[FeeConfigResponse],
    summary="Fee settings for every service line",
)
@limiter.limit("100/minute")
async def list_delivery_fees(
    request: Request,
    db: AsyncSession = Depends(get_db),
    fee_cache: FeeConfigCache = Depends(get_fee_cache),
):
    configs = await fee_cache.all(FeeConfigStore(db))
    return [_fee_response(service, config) for service, config in configs.items()]


@router.put(
    "/delivery-fees/{service}",
    response_model=FeeConfigResponse,
    summary="Save fee settings for one service line",
)
@limiter.limit("100/minute")
async def update_delivery_fees(
    request: Request,
    service: ServiceLine,
    body: FeeConfigUpdate,
    db: AsyncSession = Depends(get_db),
    fee_cache: FeeConfigCache = Depends(get_fee_cache),
):
    store = FeeConfigStore(db)
    saved = await store.save(
        service,
        DeliveryFeeConfig(
            base_fee=body.base_fee,
            per_km_fee=body.per_km_fee,
            base_distance_km=body.base_distance_km,
        ),
    )
    await fee_cache.reload(store)
    return _fee_response(service, saved)


@router.post(
    "/delivery-fees/reload",
    response_model=list[FeeConfigResponse],
    summary="Reload fee settings from the store",
)
@limiter.limit("100/minute")
async def reload_delivery_fees(
    request: Request,
    db: AsyncSession = Depends(get_db),
    fee_cache: FeeConfigCache = Depends(get_fee_cache),
):
    configs = await fee_cache.reload(FeeConfigStore(db))
    return [_fee_response(service, config) for service, config in configs.items()]


# ── Custom locations ──────────────────────────────────────────────────


@router.get(
    "/locations",
    response_model=list[CustomLocationResponse],
    summary="List custom locations",
)
@limiter.limit("100/minute")
async def list_locations(request: Request, db: AsyncSession = Depends(get_db)):
    return await CustomLocationRepository(db).list_all()


@router.post(
    "/locations",
    status_code=201,
    response_model=CustomLocationResponse,
    summary="Add a custom location",
)
@limiter.limit("100/minute")
async def create_location(
    request: Request,
    body: CustomLocationCreate,
    db: AsyncSession = Depends(get_db),
):
    return await CustomLocationRepository(db).create(
        name=body.name,
        latitude=body.latitude,
        longitude=body.longitude,
        active=body.active,
        sort_order=body.sort_order,
    )


@router.patch(
    "/locations/{location_id}",
    response_model=CustomLocationResponse,
    summary="Edit a custom location",
)
@limiter.limit("100/minute")
async def update_location(
    request: Request,
    location_id: str,
    body: CustomLocationUpdate,
    db: AsyncSession = Depends(get_db),
):
    repo = CustomLocationRepository(db)
    location = await repo.get_by_id(location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    return await repo.update(location, **body.model_dump(exclude_unset=True))


@router.delete(
    "/locations/{location_id}",
    status_code=204,
    summary="Remove a custom location",
)
@limiter.limit("100/minute")
async def delete_location(
    request: Request,
    location_id: str,
    db: AsyncSession = Depends(get_db),
):
    repo = CustomLocationRepository(db)
    location = await repo.get_by_id(location_id)
    if not location:
        raise HTTPException(status_code=404, detail="Location not found")
    await repo.delete(location)


@router.get("/health", response_model=HealthResponse, summary="Health check")
async def health():
    return HealthResponse()
