"""Postgres access for the tracking tables.

Cycles and symptom logs are read and written straight through asyncpg rather
than PostgREST: row-level security on ``cycles`` and ``symptom_logs`` keys off
``app.current_user_id``, which only a real connection can set.  Profiles go
through PostgREST instead (see ``src.services.profiles``).

Each helper runs in its own transaction with the user id set transaction-
locally, so a pooled connection never carries one user's identity into the
next request.
"""

from __future__ import annotations

import logging
import uuid
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator

import asyncpg

from src.config import Settings, get_settings

logger = logging.getLogger("flowtrack.db")

_RLS_USER_SQL = "SELECT set_config('app.current_user_id', $1, true)"

# Created by the app lifespan; None outside it
_pool: asyncpg.Pool | None = None


async def init_pool(settings: Settings | None = None) -> asyncpg.Pool:
    """Open the tracking database pool using the configured bounds."""
    global _pool
    s = settings or get_settings()
    _pool = await asyncpg.create_pool(
        s.supabase_db_url,
        min_size=s.db_pool_min_size,
        max_size=s.db_pool_max_size,
        command_timeout=s.db_command_timeout_s,
    )
    logger.info(
        "Tracking database pool ready (min=%d, max=%d)",
        s.db_pool_min_size, s.db_pool_max_size,
    )
    return _pool


async def close_pool() -> None:
    global _pool
    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("Tracking database pool closed")


def get_pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("Tracking database pool is not open")
    return _pool


@asynccontextmanager
async def get_connection(
    user_id: uuid.UUID | None = None,
) -> AsyncGenerator[asyncpg.Connection, None]:
    """Yield a pooled connection inside a transaction scoped to ``user_id``.

    Without a user id no RLS identity is set, which only suits queries that
    touch no tracking rows (the liveness check, for one).
    """
    async with get_pool().acquire() as conn, conn.transaction():
        if user_id is not None:
            await conn.execute(_RLS_USER_SQL, str(user_id))
        yield conn


async def execute(query: str, *args: Any, user_id: uuid.UUID | None = None) -> str:
    """Run a write and return asyncpg's status tag, e.g. ``"DELETE 1"``."""
    async with get_connection(user_id) as conn:
        return await conn.execute(query, *args)


async def fetch(
    query: str, *args: Any, user_id: uuid.UUID | None = None
) -> list[asyncpg.Record]:
    async with get_connection(user_id) as conn:
        return await conn.fetch(query, *args)


async def fetchrow(
    query: str, *args: Any, user_id: uuid.UUID | None = None
) -> asyncpg.Record | None:
    async with get_connection(user_id) as conn:
        return await conn.fetchrow(query, *args)


async def fetchval(query: str, *args: Any, user_id: uuid.UUID | None = None) -> Any:
    async with get_connection(user_id) as conn:
        return await conn.fetchval(query, *args)
