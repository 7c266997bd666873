from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase

from core.config import Settings


class Base(DeclarativeBase):
    pass


def build_engine(settings: Settings) -> AsyncEngine:
    """Pooled engine for the catalog store; connections are checked out per operation."""
    kwargs = {"echo": settings.database_echo, "pool_pre_ping": True}
    if not settings.database_url.startswith("sqlite"):
        kwargs.update(pool_size=settings.db_pool_size, pool_timeout=settings.db_pool_timeout)
    return create_async_engine(settings.database_url, **kwargs)


def build_session_maker(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(engine, expire_on_commit=False)


async def create_db_and_tables(engine: AsyncEngine) -> None:
    # Register the inventory models on Base.metadata before creating tables
    import db.inventory  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
