import logging
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.orm import DeclarativeBase

from app.cache import cache
from app.config import settings
from app.middleware import install_query_counter

logger = logging.getLogger(__name__)

# Tests swap in their own engine and session factory through get_db overrides.
engine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_pre_ping=True,
)

install_query_counter(engine)

async_session = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    pass


async def create_tables(drop: bool = False) -> None:
    """Create every mapped table on the configured engine (scripts only)."""
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        if drop:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Schema ready on %s", engine.url.render_as_string(hide_password=True))


@asynccontextmanager
async def session_scope(factory: async_sessionmaker[AsyncSession]):
    """
    Yield a session from *factory*; commit when the caller succeeds, roll
    back otherwise.  Cache entries for events written in the session are
    purged once more after the commit.
    """
    async with factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        await cache.invalidate_committed(session)


async def get_db():
    async with session_scope(async_session) as session:
        yield session
