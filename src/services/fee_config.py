"""
Fee configuration store backed by the ``site_settings`` key/value table.

Keys per service line: ``<prefix>_base_fee``, ``<prefix>_per_km_fee`` and
``<prefix>_base_distance`` where the prefix is ``delivery`` (food),
``padala`` (parcel) or ``pabili`` (errand).  Values are stored as text.
A missing, unparsable, non-finite or negative value is replaced by the
service line's default.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.entities import DEFAULT_FEE_CONFIGS, DeliveryFeeConfig
from src.domain.enums import SETTINGS_PREFIX, ServiceLine
from src.infrastructure.repositories import SiteSettingRepository

logger = logging.getLogger(__name__)

FIELDS = ("base_fee", "per_km_fee", "base_distance_km")

_SUFFIXES = {
    "base_fee": "base_fee",
    "per_km_fee": "per_km_fee",
    "base_distance_km": "base_distance",
}

_DESCRIPTIONS = {
    "base_fee": "Base delivery fee for {service} in Pesos",
    "per_km_fee": "Fee per kilometer for {service} in Pesos",
    "base_distance_km": "Base distance included in base fee for {service} (km)",
}


def settings_keys(service: ServiceLine) -> dict[str, str]:
    """Map config field name -> ``site_settings`` key for *service*."""
    prefix = SETTINGS_PREFIX[service]
    return {name: f"{prefix}_{_SUFFIXES[name]}" for name in FIELDS}


def parse_setting(raw: Optional[str], default: float) -> float:
    if raw is None:
        return default
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(value) or value < 0:
        return default
    return value


def coerce_number(value) -> float:
    """Admin form coercion: anything non-numeric becomes 0."""
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    return number if math.isfinite(number) else 0.0


def config_from_values(
    service: ServiceLine, values: dict[str, str]
) -> DeliveryFeeConfig:
    default = DEFAULT_FEE_CONFIGS[service]
    keys = settings_keys(service)
    parsed = {
        name: parse_setting(values.get(key), getattr(default, name))
        for name, key in keys.items()
    }
    missing = [key for key in keys.values() if key not in values]
    if missing:
        logger.info("Fee settings missing for %s, using defaults: %s", service.value, missing)
    return DeliveryFeeConfig(**parsed)


class FeeConfigStore:
    def __init__(self, session: AsyncSession):
        self.repo = SiteSettingRepository(session)

    async def load(self, service: ServiceLine) -> DeliveryFeeConfig:
        values = await self.repo.get_values(list(settings_keys(service).values()))
        return config_from_values(service, values)

    async def load_all(self) -> dict[ServiceLine, DeliveryFeeConfig]:
        keys = [key for service in ServiceLine for key in settings_keys(service).values()]
        values = await self.repo.get_values(keys)
        return {service: config_from_values(service, values) for service in ServiceLine}

    async def save(
        self, service: ServiceLine, config: DeliveryFeeConfig
    ) -> DeliveryFeeConfig:
        for name, key in settings_keys(service).items():
            await self.repo.upsert(
                key,
                str(coerce_number(getattr(config, name))),
                type_="number",
                description=_DESCRIPTIONS[name].format(service=service.value),
            )
        return await self.load(service)

    async def ensure_defaults(self, service: ServiceLine) -> list[str]:
        """Write the default for every absent key of *service*; existing
        values are left alone.  Returns the keys written."""
        default = DEFAULT_FEE_CONFIGS[service]
        keys = settings_keys(service)
        existing = await self.repo.get_values(list(keys.values()))
        written = []
        for name, key in keys.items():
            if key in existing:
                continue
            await self.repo.upsert(
                key,
                str(getattr(default, name)),
                type_="number",
                description=_DESCRIPTIONS[name].format(service=service.value),
            )
            written.append(key)
        return written


class FeeConfigCache:
    """
    In-memory fee configs, loaded on first use and refreshed only on an
    explicit ``reload`` which replaces the whole mapping.
    """

    def __init__(self) -> None:
        self._configs: Optional[dict[ServiceLine, DeliveryFeeConfig]] = None

    @property
    def loaded(self) -> bool:
        return self._configs is not None

    async def reload(self, store: FeeConfigStore) -> dict[ServiceLine, DeliveryFeeConfig]:
        self._configs = await store.load_all()
        return dict(self._configs)

    async def get(self, service: ServiceLine, store: FeeConfigStore) -> DeliveryFeeConfig:
        if self._configs is None:
            await self.reload(store)
        return self._configs[service]

    async def all(self, store: FeeConfigStore) -> dict[ServiceLine, DeliveryFeeConfig]:
        if self._configs is None:
            await self.reload(store)
        return dict(self._configs)
