"""Tests for the tracking database pool and RLS-scoped helpers."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from src.config import Settings
from src.services import supabase
from src.services.tests.conftest import TEST_USER_ID


@pytest.fixture
def conn() -> MagicMock:
    conn = MagicMock()
    conn.execute = AsyncMock(return_value="DELETE 1")
    conn.fetch = AsyncMock(return_value=[{"length": 28}])
    return conn


@pytest.fixture
def pool(conn: MagicMock, monkeypatch: pytest.MonkeyPatch) -> MagicMock:
    pool = MagicMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    monkeypatch.setattr(supabase, "_pool", pool)
    return pool


class TestPoolLifecycle:
    @pytest.mark.asyncio
    async def test_init_pool_uses_configured_bounds(
        self, settings: Settings, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setattr(supabase, "_pool", None)
        created = MagicMock()
        create_pool = AsyncMock(return_value=created)
        monkeypatch.setattr(supabase.asyncpg, "create_pool", create_pool)
        settings.db_pool_max_size = 4

        assert await supabase.init_pool(settings) is created
        create_pool.assert_awaited_once_with(
            settings.supabase_db_url, min_size=1, max_size=4, command_timeout=30.0
        )
        assert supabase.get_pool() is created

    @pytest.mark.asyncio
    async def test_close_pool(self, pool: MagicMock) -> None:
        pool.close = AsyncMock()
        await supabase.close_pool()
        pool.close.assert_awaited_once()
        with pytest.raises(RuntimeError):
            supabase.get_pool()

    def test_get_pool_before_init(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(supabase, "_pool", None)
        with pytest.raises(RuntimeError, match="not open"):
            supabase.get_pool()


class TestRlsHelpers:
    @pytest.mark.asyncio
    async def test_fetch_sets_user_before_query(self, pool: MagicMock, conn: MagicMock) -> None:
        rows = await supabase.fetch(
            "SELECT * FROM cycles WHERE user_id = $1", TEST_USER_ID, user_id=TEST_USER_ID
        )

        assert rows == [{"length": 28}]
        conn.execute.assert_awaited_once_with(
            "SELECT set_config('app.current_user_id', $1, true)", str(TEST_USER_ID)
        )
        conn.fetch.assert_awaited_once_with(
            "SELECT * FROM cycles WHERE user_id = $1", TEST_USER_ID
        )
        conn.transaction.assert_called_once()

    @pytest.mark.asyncio
    async def test_no_user_skips_rls_identity(self, pool: MagicMock, conn: MagicMock) -> None:
        await supabase.fetch("SELECT 1")
        conn.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_execute_returns_status_tag(self, pool: MagicMock, conn: MagicMock) -> None:
        status = await supabase.execute(
            "DELETE FROM cycles WHERE cycle_id = $1", 7, user_id=TEST_USER_ID
        )
        assert status == "DELETE 1"
        assert conn.execute.await_count == 2
