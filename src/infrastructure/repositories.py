"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from .models import CustomLocationModel, SiteSettingModel


class SiteSettingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_values(self, keys: list[str]) -> dict[str, str]:
        result = await self.session.execute(
            select(SiteSettingModel).where(SiteSettingModel.id.in_(keys))
        )
        return {row.id: row.value for row in result.scalars().all()}

    async def upsert(
        self,
        key: str,
        value: str,
        *,
        type_: str = "text",
        description: str | None = None,
    ) -> SiteSettingModel:
        row = await self.session.get(SiteSettingModel, key)
        if row is None:
            row = SiteSettingModel(id=key, value=value, type=type_, description=description)
            self.session.add(row)
        else:
            row.value = value
            row.type = type_
            if description is not None:
                row.description = description
        await self.session.flush()
        return row


class CustomLocationRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def list_all(self) -> list[CustomLocationModel]:
        result = await self.session.execute(
            select(CustomLocationModel).order_by(CustomLocationModel.sort_order)
        )
        return list(result.scalars().all())

    async def search_active(self, query: str) -> list[CustomLocationModel]:
        """Case-insensitive substring match on the name of active locations."""
        pattern = f"%{query.lower()}%"
        result = await self.session.execute(
            select(CustomLocationModel)
            .where(CustomLocationModel.active.is_(True))
            .where(func.lower(CustomLocationModel.name).like(pattern))
            .order_by(CustomLocationModel.sort_order)
        )
        return list(result.scalars().all())

    async def count(self) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(CustomLocationModel)
        )
        return result.scalar() or 0

    async def get_by_id(self, location_id: str) -> Optional[CustomLocationModel]:
        return await self.session.get(CustomLocationModel, location_id)

    async def create(
        self,
        *,
        name: str,
        latitude: float,
        longitude: float,
        active: bool = True,
        sort_order: int | None = None,
    ) -> CustomLocationModel:
        if sort_order is None:
            sort_order = await self.count()
        location = CustomLocationModel(
            name=name.strip(),
            latitude=latitude,
            longitude=longitude,
            active=active,
            sort_order=sort_order,
        )
        self.session.add(location)
        await self.session.flush()
        await self.session.refresh(location)
        return location

    async def update(self, location: CustomLocationModel, **changes) -> CustomLocationModel:
        for attr, value in changes.items():
            if value is None:
                continue
            if attr == "name":
                value = value.strip()
            setattr(location, attr, value)
        await self.session.flush()
        await self.session.refresh(location)
        return location

    async def delete(self, location: CustomLocationModel) -> None:
        await self.session.delete(location)
        await self.session.flush()
