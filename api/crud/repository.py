"""
Table-agnostic persistence (raw SQL).

Every function takes the table name from a validated `ResourceConfig`; column
names coming from request bodies are quoted with `quote_ident` and all values
are bound.
"""

from __future__ import annotations

from typing import Any

from core import db
from core.sql import ParamList, quote_ident, to_param

from .query import ListQuery


async def list_rows(table: str, query: ListQuery) -> list[dict[str, Any]]:
    return await db.fetch_all(query.to_sql(table), *query.values)


async def get_row(table: str, record_id: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        f"SELECT * FROM {quote_ident(table)} WHERE id = $1",
        record_id,
    )


async def row_exists(table: str, record_id: str) -> bool:
    row = await db.fetch_one(
        f"SELECT id FROM {quote_ident(table)} WHERE id = $1",
        record_id,
    )
    return row is not None


async def insert_row(table: str, record: dict[str, Any]) -> None:
    params = ParamList()
    columns: list[str] = []
    placeholders: list[str] = []
    for column, value in record.items():
        columns.append(quote_ident(column))
        placeholders.append(params.add(to_param(value)))

    await db.execute(
        f"INSERT INTO {quote_ident(table)} ({', '.join(columns)}) VALUES ({', '.join(placeholders)})",
        *params.values,
    )


async def update_row(table: str, record_id: str, updates: dict[str, Any]) -> None:
    params = ParamList()
    assignments = [f"{quote_ident(column)} = {params.add(to_param(value))}" for column, value in updates.items()]
    id_placeholder = params.add(record_id)

    await db.execute(
        f"UPDATE {quote_ident(table)} SET {', '.join(assignments)} WHERE id = {id_placeholder}",
        *params.values,
    )


async def delete_row(table: str, record_id: str) -> None:
    await db.execute(
        f"DELETE FROM {quote_ident(table)} WHERE id = $1",
        record_id,
    )
