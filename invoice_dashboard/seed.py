"""Placeholder Data — seeds customers, invoices and revenue for local demos.

Invariants:
    - seed_placeholder_data is a no-op when any customer already exists
    - Invoice amounts are integer cents

Usage:
    python -m invoice_dashboard.seed      # uses DATABASE_URL, creates tables first
"""

import asyncio
import logging
from datetime import date

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from invoice_dashboard.config import get_settings
from invoice_dashboard.db.base import Base
from invoice_dashboard.db.session import create_session_factory
from invoice_dashboard.infrastructure.observability import setup_logging
from invoice_dashboard.models import Customer, Invoice, Revenue

logger = logging.getLogger(__name__)

CUSTOMERS = [
    ("3958dc9e-712f-4377-85e9-fec4b6a6442a", "Delba de Oliveira", "delba@oliveira.com"),
    ("3958dc9e-742f-4377-85e9-fec4b6a6442a", "Lee Robinson", "lee@robinson.com"),
    ("3958dc9e-737f-4377-85e9-fec4b6a6442a", "Hector Simpson", "hector@simpson.com"),
    ("50ca3e18-62cd-11ee-8c99-0242ac120002", "Steven Tey", "steven@tey.com"),
    ("3958dc9e-787f-4377-85e9-fec4b6a6442a", "Steph Dietz", "steph@dietz.com"),
    ("76d65c26-f784-44a2-ac19-586678f7c2f2", "Michael Novotny", "michael@novotny.com"),
]

# (customer index, cents, status, date)
INVOICES = [
    (0, 15795, "pending", date(2022, 12, 6)),
    (1, 20348, "pending", date(2022, 11, 14)),
    (4, 3040, "paid", date(2022, 10, 29)),
    (3, 44800, "paid", date(2023, 9, 10)),
    (5, 34577, "pending", date(2023, 8, 5)),
    (2, 54246, "pending", date(2023, 7, 16)),
    (0, 666, "pending", date(2023, 6, 27)),
    (3, 32545, "paid", date(2023, 6, 9)),
    (4, 1250, "paid", date(2023, 6, 17)),
    (5, 8546, "paid", date(2023, 6, 7)),
    (1, 500, "paid", date(2023, 8, 19)),
    (5, 8945, "paid", date(2023, 6, 3)),
    (2, 1000, "paid", date(2022, 6, 5)),
]

REVENUE = [
    ("Jan", 2000), ("Feb", 1800), ("Mar", 2200), ("Apr", 2500),
    ("May", 2300), ("Jun", 3200), ("Jul", 3500), ("Aug", 3700),
    ("Sep", 2500), ("Oct", 2800), ("Nov", 3000), ("Dec", 4800),
]


def _image_url(name: str) -> str:
    return f"/customers/{name.lower().replace(' ', '-')}.png"


async def seed_placeholder_data(db: AsyncSession) -> bool:
    """Insert placeholder rows into an empty store. Returns True if rows were added."""
    existing = (await db.execute(select(func.count()).select_from(Customer))).scalar()
    if existing:
        logger.info(f"Store already holds {existing} customers, skipping seed")
        return False

    db.add_all(
        Customer(id=cid, name=name, email=email, image_url=_image_url(name))
        for cid, name, email in CUSTOMERS
    )
    db.add_all(
        Invoice(
            customer_id=CUSTOMERS[idx][0], amount=amount,
            status=status, date=issued,
        )
        for idx, amount, status, issued in INVOICES
    )
    db.add_all(Revenue(month=m, revenue=r) for m, r in REVENUE)
    await db.commit()
    logger.info(
        f"Seeded {len(CUSTOMERS)} customers, {len(INVOICES)} invoices, "
        f"{len(REVENUE)} revenue rows",
    )
    return True


async def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    engine, session_factory = create_session_factory(settings.database_url)
    try:
        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        async with session_factory() as db:
            await seed_placeholder_data(db)
    finally:
        await engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
