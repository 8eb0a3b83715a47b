import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime
from typing import Protocol

from pydantic import ValidationError
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession
from badge_of_shame.db.models import DBKvStore
from badge_of_shame.db.operations import managed_session
from badge_of_shame.routes.badges.schema import CacheEntry
from badge_of_shame.utils.errors import CacheUnavailableError

logger = logging.getLogger(__name__)

CACHE_KEY_PREFIX = "BADGE:"


def cache_key(repo_slug: str) -> str:
    return f"{CACHE_KEY_PREFIX}{repo_slug}"


class BadgeCache(Protocol):
    async def get(self, key: str) -> CacheEntry | None: ...

    async def set(self, key: str, entry: CacheEntry) -> None: ...


class MemoryBadgeCache:
    """Process-wide cache. Entries never expire; a new build id overwrites them."""

    def __init__(self) -> None:
        self.entries: dict[str, CacheEntry] = {}

    async def get(self, key: str) -> CacheEntry | None:
        entry = self.entries.get(key)
        return entry.model_copy() if entry is not None else None

    async def set(self, key: str, entry: CacheEntry) -> None:
        self.entries[key] = entry.model_copy()


class DatabaseBadgeCache:
    """Cache shared between workers, stored as JSON rows in the kv_store table.

    A database outage never fails a badge request: reads degrade to a miss and
    writes raise ``CacheUnavailableError`` so the request falls back to the
    empty badge.
    """

    def __init__(
        self, session_factory: Callable[[], AbstractAsyncContextManager[AsyncSession]] = managed_session
    ) -> None:
        self.session_factory = session_factory

    async def get(self, key: str) -> CacheEntry | None:
        try:
            async with self.session_factory() as session:
                record = await session.get(DBKvStore, key)
        except SQLAlchemyError as exc:
            logger.warning(f"Badge cache read failed for {key}, treating as a miss: {exc!r}")
            return None
        if record is None:
            return None
        try:
            return CacheEntry.model_validate_json(record.value)
        except ValidationError:
            logger.warning(f"Ignoring undecodable cache entry for {key}")
            return None

    async def set(self, key: str, entry: CacheEntry) -> None:
        value = entry.model_dump_json()
        stmt = (
            insert(DBKvStore)
            .values(key=key, value=value, updated_at=datetime.utcnow())
            .on_conflict_do_update(
                index_elements=["key"],
                set_={"value": value, "updated_at": datetime.utcnow()},
            )
        )
        try:
            async with self.session_factory() as session:
                await session.exec(stmt)
                await session.commit()
        except SQLAlchemyError as exc:
            raise CacheUnavailableError(key, exc) from exc
