"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  Outbound HTTP never leaves the process: provider
clients are built on ``httpx.MockTransport`` handlers.
"""

from __future__ import annotations

from typing import AsyncGenerator, Callable

import httpx
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from src.domain.entities import Coordinate
from src.infrastructure.database import Base
from src.infrastructure import models  # noqa: F401  (registers tables)


TEST_DB_URL = "sqlite+aiosqlite:///:memory:"

# Floridablanca hub and a point ~1.4 km away
HUB = Coordinate(14.9746, 120.5282)
NEARBY = Coordinate(14.9800, 120.5400)


def mock_client(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
    """AsyncClient whose every request is answered by *handler*."""
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def unreachable(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("network down", request=request)


class FakeGeocoder:
    """Stands in for ``Geocoder``; resolves from a dict, records queries."""

    def __init__(self, known: dict[str, Coordinate] | None = None):
        self.known = known or {}
        self.queries: list[str] = []

    async def geocode(self, address: str):
        self.queries.append(address)
        return self.known.get(address)


# ── Fixtures ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh in-memory database per test."""
    engine = create_async_engine(
        TEST_DB_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session
