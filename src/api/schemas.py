"""Pydantic request / response schemas for the REST API."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from src.domain.entities import Coordinate
from src.domain.enums import FieldState, ServiceLine


# ── Shared ────────────────────────────────────────────────────────────


class CoordinateSchema(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)

    @classmethod
    def from_domain(cls, coordinate: Optional[Coordinate]) -> Optional["CoordinateSchema"]:
        if coordinate is None:
            return None
        return cls(lat=coordinate.lat, lng=coordinate.lng)


class LocationInput(BaseModel):
    """Either a free-text address or a point picked on the map."""

    address: Optional[str] = Field(None, max_length=500)
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)

    @model_validator(mode="after")
    def _address_or_point(self) -> "LocationInput":
        has_point = self.lat is not None and self.lng is not None
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must be given together")
        if not has_point and self.address is None:
            raise ValueError("Provide an address or lat/lng")
        return self

    def to_location(self) -> str | Coordinate:
        if self.lat is not None and self.lng is not None:
            return Coordinate(self.lat, self.lng)
        return self.address or ""


# ── Requests ──────────────────────────────────────────────────────────


class QuoteRequest(BaseModel):
    service: ServiceLine = ServiceLine.FOOD
    pickup: Optional[LocationInput] = Field(
        None, description="Defaults to the delivery hub when omitted."
    )
    dropoff: LocationInput


class AreaCheckRequest(BaseModel):
    address: str = Field(..., max_length=500)


class FeeConfigUpdate(BaseModel):
    base_fee: float = Field(..., ge=0)
    per_km_fee: float = Field(..., ge=0)
    base_distance_km: float = Field(..., ge=0)


class CustomLocationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    active: bool = True
    sort_order: Optional[int] = Field(None, ge=0)


class CustomLocationUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    active: Optional[bool] = None
    sort_order: Optional[int] = Field(None, ge=0)


# ── Responses ─────────────────────────────────────────────────────────


class QuoteResponse(BaseModel):
    service: ServiceLine
    pickup: Optional[CoordinateSchema] = None
    dropoff: Optional[CoordinateSchema] = None
    distance_km: Optional[float] = None
    duration: Optional[str] = None
    fee: float
    base_fee_applied: bool
    not_found: list[str] = []


class AreaCheckResponse(BaseModel):
    within: bool
    distance_km: Optional[float] = None
    error: Optional[str] = None
    radius_km: float


class HubResponse(BaseModel):
    label: str
    location: CoordinateSchema
    radius_km: float


class SuggestionResponse(BaseModel):
    label: str
    location: CoordinateSchema
    is_custom: bool = False


class AddressFieldResult(BaseModel):
    """Pushed over ``/locations/track`` when an address field settles."""

    text: str
    state: FieldState
    location: Optional[CoordinateSchema] = None


class ReverseGeocodeResponse(BaseModel):
    label: str
    location: CoordinateSchema


class FeeConfigResponse(BaseModel):
    service: ServiceLine
    base_fee: float
    per_km_fee: float
    base_distance_km: float


class CustomLocationResponse(BaseModel):
    id: str
    name: str
    latitude: float
    longitude: float
    active: bool
    sort_order: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class HealthResponse(BaseModel):
    status: str = "ok"


class ErrorResponse(BaseModel):
    detail: str
