"""Tests for channelkit.db.database — engine options and the session dependency."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from channelkit.config import Settings
from channelkit.db import database
from channelkit.db.database import engine_options, get_db


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestEngineOptions:
    def test_postgres_gets_pool_sizing(self):
        options = engine_options(_settings(database_pool_size=7, database_pool_recycle=600))
        assert options["pool_size"] == 7
        assert options["pool_recycle"] == 600
        assert options["pool_pre_ping"] is True
        assert options["echo"] is False

    def test_sqlite_skips_pool_sizing(self):
        options = engine_options(_settings(database_url="sqlite+aiosqlite:///./listings.db"))
        assert options == {"echo": False}

    def test_debug_echoes_sql(self):
        assert engine_options(_settings(app_debug=True))["echo"] is True


def _fake_factory(session):
    context = MagicMock()
    context.__aenter__ = AsyncMock(return_value=session)
    context.__aexit__ = AsyncMock(return_value=False)
    return MagicMock(return_value=context)


class TestGetDb:
    @pytest.mark.asyncio
    async def test_commits_on_success(self, monkeypatch):
        session = AsyncMock()
        monkeypatch.setattr(database, "async_session_factory", _fake_factory(session))

        gen = get_db()
        assert await gen.__anext__() is session
        with pytest.raises(StopAsyncIteration):
            await gen.__anext__()

        session.commit.assert_awaited_once()
        session.rollback.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rolls_back_on_error(self, monkeypatch):
        session = AsyncMock()
        monkeypatch.setattr(database, "async_session_factory", _fake_factory(session))

        gen = get_db()
        await gen.__anext__()
        with pytest.raises(RuntimeError):
            await gen.athrow(RuntimeError("zip write failed"))

        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()
