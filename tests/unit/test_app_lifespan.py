from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import FastAPI
from sqlmodel import SQLModel

from badge_of_shame.routes.badges.repository import DatabaseBadgeCache
from badge_of_shame.utils.app_lifespan import DatabaseConnectionError, database_cache


def mock_engine() -> MagicMock:
    conn = MagicMock()
    conn.run_sync = AsyncMock()
    engine = MagicMock()
    engine.begin.return_value.__aenter__ = AsyncMock(return_value=conn)
    engine.begin.return_value.__aexit__ = AsyncMock(return_value=False)
    engine.dispose = AsyncMock()
    return engine


class TestDatabaseCache:
    @pytest.mark.asyncio(loop_scope="function")
    async def test_creates_tables_and_disposes_engine(self):
        app = FastAPI()
        engine = mock_engine()

        with patch("badge_of_shame.utils.app_lifespan.get_async_engine", return_value=engine):
            async with database_cache(app):
                assert isinstance(app.state.badge_cache, DatabaseBadgeCache)
                conn = engine.begin.return_value.__aenter__.return_value
                conn.run_sync.assert_awaited_once_with(SQLModel.metadata.create_all)
                engine.dispose.assert_not_awaited()

        engine.dispose.assert_awaited_once()

    @pytest.mark.asyncio(loop_scope="function")
    async def test_connect_failure_raises_database_connection_error(self):
        app = FastAPI()
        engine = mock_engine()
        engine.begin.return_value.__aenter__.side_effect = OSError("connection refused")

        with patch("badge_of_shame.utils.app_lifespan.get_async_engine", return_value=engine):
            with pytest.raises(DatabaseConnectionError):
                async with database_cache(app):
                    pass

        assert not hasattr(app.state, "badge_cache")
        engine.dispose.assert_not_awaited()
