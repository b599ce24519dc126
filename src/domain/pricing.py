"""
Delivery Fee Calculator  (stepped / floor billing)
==================================================

Formula
-------
Fee = Base_Fee + floor(max(0, Distance - Base_Distance)) x Per_KM_Fee

* Partial kilometres beyond the included base distance are not charged
  until a full extra kilometre is crossed.
* An unknown distance (``None``, NaN, infinite or negative) is billed at
  the base fee only.

Complexity: O(1) per calculation.
"""

from __future__ import annotations

import math
from typing import Optional

from .entities import DeliveryFeeConfig


def is_known_distance(distance_km: Optional[float]) -> bool:
    return (
        distance_km is not None
        and math.isfinite(distance_km)
        and distance_km >= 0
    )


def billable_km(distance_km: float, base_distance_km: float) -> int:
    """Whole kilometres travelled beyond the included base distance."""
    return math.floor(max(0.0, distance_km - base_distance_km))


def calculate_fee(
    distance_km: Optional[float], config: DeliveryFeeConfig
) -> float:
    if not is_known_distance(distance_km):
        return config.base_fee
    return config.base_fee + billable_km(distance_km, config.base_distance_km) * config.per_km_fee
