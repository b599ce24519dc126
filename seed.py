"""
Seed script -- populates the database with sample data for reviewers.

Run after migrations:
    python seed.py

Creates:
  - default delivery fee settings for every service line (if missing)
  - sample custom locations around the Floridablanca hub
"""

import asyncio

from src.domain.enums import ServiceLine
from src.infrastructure.database import async_session_factory, engine
from src.infrastructure.repositories import CustomLocationRepository
from src.services.fee_config import FeeConfigStore


LOCATIONS = [
    {"name": "Floridablanca Municipal Hall", "latitude": 14.97463, "longitude": 120.52821},
    {"name": "Floridablanca Public Market", "latitude": 14.97390, "longitude": 120.52940},
    {"name": "Basa Air Base Main Gate", "latitude": 14.98720, "longitude": 120.49280},
    {"name": "Barangay Valdez Chapel", "latitude": 14.96010, "longitude": 120.51230},
    {"name": "Barangay San Jose Elementary School", "latitude": 14.99050, "longitude": 120.53700},
    {"name": "Dinalupihan Bus Terminal", "latitude": 14.87560, "longitude": 120.46390},
]


async def seed():
    async with async_session_factory() as session:
        # ── Fee settings ──────────────────────────────────────────────
        store = FeeConfigStore(session)
        written = []
        for service in ServiceLine:
            written += await store.ensure_defaults(service)
        print(f"  Wrote {len(written)} missing fee setting(s)")

        # ── Custom locations ──────────────────────────────────────────
        repo = CustomLocationRepository(session)
        if await repo.count() > 0:
            print("  Custom locations already seeded. Skipping.")
        else:
            for loc in LOCATIONS:
                await repo.create(**loc)
            print(f"  Created {len(LOCATIONS)} custom locations")

        await session.commit()
        print("\nSeed complete!")


async def main():
    print("Seeding database...")
    await seed()
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
