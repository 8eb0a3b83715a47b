from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from functools import lru_cache

from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker, create_async_engine
from sqlmodel.ext.asyncio.session import AsyncSession
from badge_of_shame.settings import settings


@lru_cache(maxsize=1)
def get_async_engine() -> AsyncEngine:
    # Created lazily so the memory cache backend never needs database settings.
    return create_async_engine(
        settings.DATABASE_URL,
        pool_size=settings.DATABASE_POOL_SIZE,
        max_overflow=settings.DATABASE_POOL_SIZE_OVERFLOW,
        pool_pre_ping=True,
    )


@lru_cache(maxsize=1)
def get_session_factory() -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(get_async_engine(), class_=AsyncSession, expire_on_commit=False)


@asynccontextmanager
async def managed_session() -> AsyncIterator[AsyncSession]:
    async with get_session_factory()() as session:
        yield session
