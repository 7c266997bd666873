from typing import Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event

from core.auth import require_auth
from core.config import Settings
from core.search import InventoryCatalog
from core.staging import StagingLedger
from db.database import build_engine, build_session_maker, create_db_and_tables
from db.inventory import Category, Footprint, Part, Stock


def sqlite_settings(path) -> Settings:
    s = Settings()
    s.database_url = f"sqlite+aiosqlite:///{path}"
    s.database_echo = False
    s.session_secret = "test-secret"
    s.allow_unsecure_cookie = True
    return s


@pytest.fixture
def settings(tmp_path) -> Settings:
    return sqlite_settings(tmp_path / "station.db")


def _begin_immediate(engine) -> None:
    """Take the SQLite write lock at BEGIN so concurrent writers queue on the busy timeout."""

    @event.listens_for(engine.sync_engine, "connect")
    def _connect(dbapi_connection, _record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def _begin(conn):
        conn.exec_driver_sql("BEGIN IMMEDIATE")


@pytest_asyncio.fixture
async def engine(settings):
    engine = build_engine(settings)
    _begin_immediate(engine)
    await create_db_and_tables(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest.fixture
def session_maker(engine):
    return build_session_maker(engine)


@pytest.fixture
def catalog(session_maker) -> InventoryCatalog:
    return InventoryCatalog(session_maker)


@pytest.fixture
def ledger(session_maker) -> StagingLedger:
    return StagingLedger(session_maker)


@pytest.fixture
def add_item(session_maker):
    """Insert one part with a single stock row; returns the part id."""
    categories: dict[str, int] = {}
    footprints: dict[str, int] = {}

    async def _add(
        mpn: Optional[str],
        category: str = "Resistor",
        footprint: Optional[str] = None,
        value: Optional[float] = None,
        quantity: Optional[int] = 10,
        staged: Optional[int] = None,
        comments: Optional[str] = None,
    ) -> int:
        async with session_maker() as db:
            if category not in categories:
                cat = Category(name=category)
                db.add(cat)
                await db.flush()
                categories[category] = cat.id
            fp_id = None
            if footprint is not None:
                if footprint not in footprints:
                    fp = Footprint(name=footprint)
                    db.add(fp)
                    await db.flush()
                    footprints[footprint] = fp.id
                fp_id = footprints[footprint]

            part = Part(
                mpn=mpn,
                category_id=categories[category],
                footprint_id=fp_id,
                value=value,
                comments=comments,
            )
            db.add(part)
            await db.flush()
            await db.execute(
                Stock.__table__.insert().values(part_id=part.id, quantity=quantity, staged=staged)
            )
            await db.commit()
            return part.id

    return _add


@pytest.fixture
def app(settings, catalog, ledger):
    from main import create_app

    app = create_app(settings)
    # ASGITransport does not run the lifespan, wire the store handles directly
    app.state.catalog = catalog
    app.state.ledger = ledger
    return app


@pytest_asyncio.fixture
async def client(app):
    app.dependency_overrides[require_auth] = lambda: None
    async with AsyncClient(transport=ASGITransport(app=app), base_url="https://testserver") as c:
        yield c
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def anon_client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="https://testserver") as c:
        yield c


@pytest.fixture
def broken_session_maker(tmp_path):
    # Parent directory does not exist, so every connection attempt fails
    return build_session_maker(build_engine(sqlite_settings(tmp_path / "missing" / "station.db")))
