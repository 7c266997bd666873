"""
Seed a small demo parts catalog.

Run locally from backend/ (or anywhere after `pip install -e .`):
  python -m scripts.seed_inventory

It uses the same DATABASE_* / DB_* env vars as the backend (dotenv supported by core.config).
Existing parts (matched by MPN) are left alone, so the script can be re-run.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from core.config import settings
from db.database import build_engine, build_session_maker, create_db_and_tables
from db.inventory import Category, Footprint, Location, Part, Stock


@dataclass(frozen=True)
class SeedPart:
    mpn: str
    category: str
    footprint: Optional[str]
    value: Optional[float]
    quantity: Optional[int]
    location: Optional[str] = None
    comments: Optional[str] = None


SEED_PARTS: list[SeedPart] = [
    SeedPart("RC0603FR-0747KL", "Resistor", "0603", 47e3, 250, "Drawer A1", "47k 1%"),
    SeedPart("RC0603FR-0710KL", "Resistor", "0603", 10e3, 500, "Drawer A1"),
    SeedPart("CFR-25JB-52-4K7", "Resistor", None, 4.7e3, 80, "Bin 3", "through-hole 4.7k"),
    SeedPart("GRM188R71H104KA93D", "CapCeramic", "0603", 100e-9, 1000, "Drawer B2", "decoupling"),
    SeedPart("GRM21BR61A476ME15L", "CapCeramic", "0805", 47e-6, 40, "Drawer B2"),
    SeedPart("EEU-FR1V101", "CapElectro", None, 100e-6, 12, "Bin 7"),
    SeedPart("SRR1260-470M", "Inductor", "SMD-12x12", 47e-6, 6, "Drawer C1"),
    SeedPart("NE555P", "IC", "DIP-8", None, 20, "Bin 1", "timer"),
    SeedPart("1N4148W", "Diode", "SOD-123", None, None, None, "count pending"),
]


async def _get_or_create(db: AsyncSession, model, name: Optional[str]):
    if name is None:
        return None
    res = await db.execute(select(model).where(model.name == name))
    obj = res.scalar_one_or_none()
    if obj is None:
        obj = model(name=name)
        db.add(obj)
        await db.flush()
    return obj


async def seed(session_maker: async_sessionmaker[AsyncSession]) -> int:
    """Insert any missing demo parts. Returns how many parts were created."""
    created = 0
    async with session_maker() as db:
        res = await db.execute(select(Part.mpn))
        existing = {mpn for (mpn,) in res.all()}

        for sp in SEED_PARTS:
            if sp.mpn in existing:
                continue

            category = await _get_or_create(db, Category, sp.category)
            footprint = await _get_or_create(db, Footprint, sp.footprint)
            location = await _get_or_create(db, Location, sp.location)

            part = Part(
                mpn=sp.mpn,
                category_id=category.id,
                footprint_id=footprint.id if footprint else None,
                value=sp.value,
                comments=sp.comments,
            )
            db.add(part)
            await db.flush()

            db.add(
                Stock(
                    part_id=part.id,
                    location_id=location.id if location else None,
                    quantity=sp.quantity,
                )
            )
            created += 1

        await db.commit()
    return created


async def main() -> None:
    engine = build_engine(settings)
    try:
        await create_db_and_tables(engine)
        created = await seed(build_session_maker(engine))
    finally:
        await engine.dispose()
    print(f"Done. Parts created: {created}.")


if __name__ == "__main__":
    asyncio.run(main())
