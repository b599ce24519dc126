"""
Domain entities and value objects.

Patterns used
-------------
- **Value Objects** (``Coordinate``, ``DistanceResult``, ``DeliveryFeeConfig``,
  ``AreaCheck``): immutable, recomputed per query, never persisted.
- **State Pattern** on ``AddressField``: enforces the per-field request
  lifecycle (IDLE -> DEBOUNCING -> GEOCODING -> RESOLVED | FAILED).
- ``RequestGeneration`` is the supersede-on-edit token: only the result of
  the most recently issued request may be applied.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Optional

from .enums import FIELD_TRANSITIONS, FieldState, ServiceLine


class InvalidCoordinate(ValueError):
    """Raised when a latitude / longitude pair is out of range or not finite."""


class InvalidStateTransition(Exception):
    """Raised when an address field status change violates the state machine."""


# ── Value Objects ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.lat) and math.isfinite(self.lng)):
            raise InvalidCoordinate(f"Non-finite coordinate ({self.lat}, {self.lng})")
        if not -90 <= self.lat <= 90:
            raise InvalidCoordinate(f"Latitude {self.lat} out of range")
        if not -180 <= self.lng <= 180:
            raise InvalidCoordinate(f"Longitude {self.lng} out of range")


@dataclass(frozen=True)
class DistanceResult:
    distance_km: float
    duration_label: Optional[str] = None


@dataclass(frozen=True)
class DeliveryFeeConfig:
    base_fee: float
    per_km_fee: float
    base_distance_km: float


DEFAULT_FEE_CONFIGS: dict[ServiceLine, DeliveryFeeConfig] = {
    ServiceLine.FOOD: DeliveryFeeConfig(base_fee=60.0, per_km_fee=13.0, base_distance_km=0.0),
    ServiceLine.PARCEL: DeliveryFeeConfig(base_fee=60.0, per_km_fee=13.0, base_distance_km=3.0),
    ServiceLine.ERRAND: DeliveryFeeConfig(base_fee=60.0, per_km_fee=13.0, base_distance_km=3.0),
}


@dataclass(frozen=True)
class HubLocation:
    coordinate: Coordinate
    label: str


@dataclass(frozen=True)
class AreaCheck:
    within: bool
    distance_km: Optional[float] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class Suggestion:
    label: str
    coordinate: Coordinate
    is_custom: bool = False


# ── Entities ──────────────────────────────────────────────────────────


class RequestGeneration:
    """Monotonic counter; a captured token is stale once a newer one is issued."""

    def __init__(self) -> None:
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def next(self) -> int:
        self._current += 1
        return self._current

    def is_current(self, token: int) -> bool:
        return token == self._current


@dataclass
class AddressField:
    text: str = ""
    state: FieldState = FieldState.IDLE
    coordinate: Optional[Coordinate] = None
    generation: RequestGeneration = field(default_factory=RequestGeneration)

    def transition_to(self, new_state: FieldState) -> None:
        """Move to *new_state* if the transition is legal, else raise."""
        allowed = FIELD_TRANSITIONS.get(self.state, set())
        if new_state not in allowed:
            raise InvalidStateTransition(
                f"Cannot transition from {self.state} to {new_state}"
            )
        self.state = new_state
