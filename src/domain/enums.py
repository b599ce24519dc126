"""Domain enumerations and state-transition rules."""

import enum


class ServiceLine(str, enum.Enum):
    FOOD = "food"
    PARCEL = "parcel"
    ERRAND = "errand"


# Key prefix used by each service line in the ``site_settings`` table
SETTINGS_PREFIX: dict[ServiceLine, str] = {
    ServiceLine.FOOD: "delivery",
    ServiceLine.PARCEL: "padala",
    ServiceLine.ERRAND: "pabili",
}


class FieldState(str, enum.Enum):
    IDLE = "IDLE"
    DEBOUNCING = "DEBOUNCING"
    GEOCODING = "GEOCODING"
    RESOLVED = "RESOLVED"
    FAILED = "FAILED"


# State machine: maps current status -> set of valid next statuses.
# Any state may fall back to IDLE when the field is cleared.
FIELD_TRANSITIONS: dict[FieldState, set[FieldState]] = {
    FieldState.IDLE: {FieldState.DEBOUNCING, FieldState.IDLE},
    FieldState.DEBOUNCING: {
        FieldState.DEBOUNCING,
        FieldState.GEOCODING,
        FieldState.IDLE,
    },
    FieldState.GEOCODING: {
        FieldState.RESOLVED,
        FieldState.FAILED,
        FieldState.DEBOUNCING,
        FieldState.IDLE,
    },
    FieldState.RESOLVED: {FieldState.DEBOUNCING, FieldState.IDLE},
    FieldState.FAILED: {FieldState.DEBOUNCING, FieldState.IDLE},
}
