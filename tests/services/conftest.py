"""Service test fixtures — seeded SQLite store + FastAPI test client.

Invariants:
    - Every test gets a fresh SQLite database file (tmp_path)
    - db_manager is swapped for one bound to the test engine; fetchers and
      routes resolve it at call time, so no dependency override is needed
    - Artificial delays are off (DEMO_LATENCY_SCALE=0 in the root conftest)

Design Decisions:
    - File-backed SQLite over :memory:: concurrent fetches open separate
      connections, and each :memory: connection would see an empty database
"""

from datetime import date

import pytest
from sqlalchemy.ext.asyncio import (
    AsyncSession, create_async_engine, async_sessionmaker,
)
from httpx import ASGITransport, AsyncClient

from invoice_dashboard.core.errors import DatabaseError
from invoice_dashboard.db.base import Base
from invoice_dashboard.infrastructure.database import DatabaseSessionManager
import invoice_dashboard.infrastructure.database as db_module
from invoice_dashboard.main import app
from invoice_dashboard.models import Customer, Invoice
from invoice_dashboard.seed import seed_placeholder_data


@pytest.fixture
async def test_engine(tmp_path):
    engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'dashboard.db'}", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def store(test_engine, test_session_factory, monkeypatch):
    """DatabaseSessionManager bound to the test engine, installed as db_manager."""
    manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    manager.engine = test_engine
    manager._session_factory = test_session_factory
    monkeypatch.setattr(db_module, "db_manager", manager)
    return manager


@pytest.fixture
async def seeded(store, test_db):
    """Store holding the placeholder customers, invoices and revenue."""
    await seed_placeholder_data(test_db)
    return store


@pytest.fixture
async def add_invoice(test_db):
    """Insert one invoice (and its customer if new) into the test DB."""

    async def _add(
        invoice_id: str, amount: int, status: str = "pending",
        issued: date = date(2024, 1, 15), customer_id: str = "cust-ada",
    ) -> Invoice:
        if await test_db.get(Customer, customer_id) is None:
            test_db.add(Customer(
                id=customer_id, name="Ada Lovelace",
                email="ada@example.com", image_url="/customers/ada.png",
            ))
        invoice = Invoice(
            id=invoice_id, customer_id=customer_id,
            amount=amount, status=status, date=issued,
        )
        test_db.add(invoice)
        await test_db.commit()
        return invoice

    return _add


@pytest.fixture
def count_queries(store, monkeypatch):
    """Record every statement the store executes: {"fetch_all": [...], "fetch_scalar": [...]}."""
    log = {"fetch_all": [], "fetch_scalar": []}

    for name in log:
        original = getattr(store, name)

        def _counting(statement, _name=name, _original=original):
            log[_name].append(statement)
            return _original(statement)

        monkeypatch.setattr(store, name, _counting)
    return log


@pytest.fixture
def broken_store(store, monkeypatch):
    """Every query fails the way the session manager reports store failures."""

    async def _fail(statement):
        raise DatabaseError("connection refused by 10.0.0.5", "execute")

    monkeypatch.setattr(store, "fetch_all", _fail)
    monkeypatch.setattr(store, "fetch_scalar", _fail)
    return store


@pytest.fixture
def unreachable_store(store, monkeypatch):
    """Every query fails with the raw driver error of a refused connection."""

    async def _fail(statement):
        raise ConnectionRefusedError(111, "Connect call failed ('127.0.0.1', 1)")

    monkeypatch.setattr(store, "fetch_all", _fail)
    monkeypatch.setattr(store, "fetch_scalar", _fail)
    return store


@pytest.fixture
async def client(store):
    """FastAPI test client; lifespan is not run, the patched db_manager is used."""
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
