"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Every helper acquires its own connection; statements are never grouped into a
transaction. A request that cannot get a connection within
`DB_CONNECT_TIMEOUT` seconds fails instead of waiting indefinitely.
"""

from __future__ import annotations

import json
import logging
from datetime import date, datetime
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from . import settings

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None

# Failures a caller of fetch_one/fetch_all/execute may see.
DRIVER_ERRORS: tuple[type[BaseException], ...] = (
    asyncpg.exceptions.PostgresError,
    asyncpg.exceptions.InterfaceError,
    OSError,
    TimeoutError,
    RuntimeError,
)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    # TLS is driven by DATABASE_SSL, not by the DSN.
    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = settings.database_url_raw()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def _ssl_mode() -> str | bool:
    return "require" if settings.database_ssl_enabled() else False


def encode_temporal(value: Any) -> str:
    # Sent as text so ISO strings from request bodies are cast by PostgreSQL.
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


def decode_timestamp(text: str) -> datetime | str:
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        # infinity, BC dates
        return text


def decode_date(text: str) -> date | str:
    try:
        return date.fromisoformat(text)
    except ValueError:
        return text


def encode_json(value: Any) -> str:
    # Objects arrive already serialized by `core.sql.to_param`.
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=True, default=str)


async def _init_connection(conn: asyncpg.Connection) -> None:
    """
    Per-connection codecs: temporal types travel as text, json/jsonb decode
    to Python objects instead of raw strings.
    """
    for typename in ("timestamp", "timestamptz"):
        await conn.set_type_codec(
            typename,
            schema="pg_catalog",
            encoder=encode_temporal,
            decoder=decode_timestamp,
            format="text",
        )
    await conn.set_type_codec(
        "date",
        schema="pg_catalog",
        encoder=encode_temporal,
        decoder=decode_date,
        format="text",
    )
    for typename in ("json", "jsonb"):
        await conn.set_type_codec(
            typename,
            schema="pg_catalog",
            encoder=encode_json,
            decoder=json.loads,
            format="text",
        )


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=settings.pool_min_size(),
        max_size=settings.pool_max_size(),
        timeout=settings.connect_timeout_s(),
        command_timeout=settings.command_timeout_s(),
        ssl=_ssl_mode(),
        init=_init_connection,
    )
    logger.info(
        "db_pool_ready min_size=%s max_size=%s ssl=%s",
        settings.pool_min_size(),
        settings.pool_max_size(),
        settings.database_ssl_enabled(),
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    async with pool().acquire(timeout=settings.connect_timeout_s()) as conn:
        row = await conn.fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    async with pool().acquire(timeout=settings.connect_timeout_s()) as conn:
        rows = await conn.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def execute(sql: str, *args: Any) -> str:
    """
    Run a statement (INSERT/UPDATE/DELETE). Returns the command status tag.
    """
    async with pool().acquire(timeout=settings.connect_timeout_s()) as conn:
        return await conn.execute(sql, *args)


async def ping() -> bool:
    try:
        row = await fetch_one("SELECT 1 AS ok")
    except DRIVER_ERRORS as exc:
        logger.warning("db_ping_failed error=%s", exc)
        return False
    return row is not None
