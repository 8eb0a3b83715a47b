from collections.abc import AsyncIterator
from contextlib import AsyncExitStack, asynccontextmanager

import aiohttp
from fastapi import FastAPI
from sqlmodel import SQLModel
from badge_of_shame.db.operations import get_async_engine
from badge_of_shame.routes.badges.repository import DatabaseBadgeCache, MemoryBadgeCache
from badge_of_shame.settings import settings
from badge_of_shame.utils.http import request_timeout
from badge_of_shame.utils.logger import logger


class DatabaseConnectionError(Exception):
    """Raised when unable to establish database connection."""


@asynccontextmanager
async def http_session(app: FastAPI) -> AsyncIterator[None]:
    async with aiohttp.ClientSession(timeout=request_timeout()) as session:
        app.state.http_session = session
        logger.info(f"HTTP session opened with a {settings.HTTP_TIMEOUT_SECONDS}s timeout per request.")
        yield
    logger.info("HTTP session closed.")


@asynccontextmanager
async def database_cache(app: FastAPI) -> AsyncIterator[None]:
    # Initialisation phase
    async_engine = get_async_engine()
    try:
        async with async_engine.begin() as conn:
            await conn.run_sync(SQLModel.metadata.create_all)
        logger.info(f'Database tables created successfully for "{settings.POSTGRES_DB}".')
    except Exception as exc:
        error_msg = "Failed to connect to database with settings."
        raise DatabaseConnectionError(error_msg) from exc
    app.state.badge_cache = DatabaseBadgeCache()
    yield

    # Cleanup phase
    await async_engine.dispose()
    logger.info("Database connection closed.")


@asynccontextmanager
async def memory_cache(app: FastAPI) -> AsyncIterator[None]:
    app.state.badge_cache = MemoryBadgeCache()
    yield


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    stack = AsyncExitStack()
    await stack.enter_async_context(http_session(app))
    if settings.CACHE_BACKEND == "database":
        await stack.enter_async_context(database_cache(app))
    else:
        await stack.enter_async_context(memory_cache(app))
    logger.info(f"Badge cache backend: {settings.CACHE_BACKEND}")

    async with stack:
        yield
