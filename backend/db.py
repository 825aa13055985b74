"""
Database connection pool and transactional connection manager.

All database access goes through transaction().
Never use pool.acquire() directly outside this module.
"""

from __future__ import annotations

import json
from contextlib import asynccontextmanager
from pathlib import Path

import asyncpg

from backend.config import settings

pool: asyncpg.Pool | None = None


async def init_pool() -> None:
    """
    Initialize the connection pool.
    Called once at application startup.
    """
    global pool
    pool = await asyncpg.create_pool(
        dsn=settings.DATABASE_URL,
        min_size=2,
        max_size=20,
        command_timeout=60,
        init=_init_connection,
    )


async def close_pool() -> None:
    """
    Close the connection pool.
    Called at application shutdown.
    """
    global pool
    if pool is not None:
        await pool.close()
        pool = None


async def _init_connection(conn: asyncpg.Connection) -> None:
    """
    Initialize each new connection.
    JSON payload columns decode to Python dict/list.
    """
    await conn.set_type_codec(
        "jsonb",
        encoder=lambda v: json.dumps(v, default=str),
        decoder=json.loads,
        schema="pg_catalog",
    )
    await conn.set_type_codec(
        "json",
        encoder=lambda v: json.dumps(v, default=str),
        decoder=json.loads,
        schema="pg_catalog",
    )


@asynccontextmanager
async def transaction():
    """
    Acquire a connection with an open transaction.

    Everything done through the yielded connection commits together when
    the block exits, or rolls back if it raises.

    Usage:
        async with transaction() as conn:
            row = await conn.fetchrow("SELECT * FROM trips WHERE id = $1 FOR UPDATE", trip_id)

    Yields:
        asyncpg.Connection inside a transaction
    """
    if pool is None:
        raise RuntimeError("Database pool not initialized. Call init_pool() first.")

    async with pool.acquire() as conn:
        async with conn.transaction():
            yield conn


SCHEMA_PATH = Path(__file__).parent / "schema.sql"


async def apply_schema() -> None:
    """Create any missing tables. Used by tests and scripts/seed_demo_trip.py."""
    async with transaction() as conn:
        await conn.execute(SCHEMA_PATH.read_text())
