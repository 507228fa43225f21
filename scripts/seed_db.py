"""Create tables and load a few sample vendors."""

import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.config import settings
from src.models import Base, Vendor


SAMPLE_VENDORS = [
    {
        "sr_no": "1",
        "chemical_name": "Acetone",
        "category": "Solvent",
        "cas_no": "67-64-1",
        "supplier_name": "Deepak Phenolics",
        "contact_info": "sales@example.com",
        "phone_number": "+91 22 5550 0101",
        "business_status": "Manufacturer",
        "country": "India",
    },
    {
        "sr_no": "2",
        "chemical_name": "Benzene",
        "category": "Aromatic",
        "cas_no": "71-43-2",
        "supplier_name": "Reliance Industries",
        "contact_info": "https://example.com/benzene",
        "phone_number": "+91 22 5550 0102",
        "business_status": "Manufacturer",
        "country": "India",
    },
    {
        "sr_no": "3",
        "chemical_name": "Toluene",
        "category": "Solvent",
        "cas_no": "108-88-3",
        "supplier_name": "Sinopec Trading",
        "contact_info": "trade@example.com",
        "phone_number": "+86 10 5550 0103",
        "business_status": "Trader",
        "country": "China",
    },
]


async def seed():
    """Seed the database with sample vendors (skips existing Sr. Nos)."""
    engine = create_async_engine(settings.database_url)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        existing = set((await session.execute(select(Vendor.sr_no))).scalars().all())
        added = 0
        for data in SAMPLE_VENDORS:
            if data["sr_no"] in existing:
                continue
            session.add(Vendor(**data))
            added += 1
        await session.commit()

    await engine.dispose()
    print(f"Seeded {added} vendors")


if __name__ == "__main__":
    asyncio.run(seed())
