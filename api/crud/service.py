"""
CRUD business logic shared by every resource.

Each mutating operation re-reads the row after writing so callers always see
server-computed values (generated id, timestamps, trigger effects).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from core import db, errors

from . import repository
from .config import ResourceConfig
from .query import parse_list_query

logger = logging.getLogger(__name__)

# Set once at creation; never accepted from an update body.
IMMUTABLE_COLUMNS = frozenset({"id", "created_at"})
SERVER_STAMPED_COLUMNS = frozenset({"updated_at"})


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _is_missing(value: Any) -> bool:
    return value is None or value == ""


def _not_found(config: ResourceConfig) -> errors.NotFoundError:
    return errors.NotFoundError(f"{config.table} record not found")


async def list_records(config: ResourceConfig, query_params: Mapping[str, str]) -> list[dict] | dict:
    query = parse_list_query(config, query_params)
    for item in query.ignored:
        logger.debug(
            "list_param_ignored table=%s name=%s value=%r reason=%s",
            config.table,
            item.name,
            item.value,
            item.reason,
        )

    try:
        rows = await repository.list_rows(config.table, query)
    except db.DRIVER_ERRORS as exc:
        raise errors.from_database_error(exc, table=config.table, operation="list") from exc

    if config.envelope:
        return {"data": rows, "count": len(rows)}
    return rows


async def get_record(config: ResourceConfig, record_id: str) -> dict:
    try:
        row = await repository.get_row(config.table, record_id)
    except db.DRIVER_ERRORS as exc:
        raise errors.from_database_error(exc, table=config.table, operation="get") from exc
    if row is None:
        raise _not_found(config)
    return row


async def create_record(config: ResourceConfig, payload: dict[str, Any]) -> dict:
    for field in config.required_fields:
        if _is_missing(payload.get(field)):
            raise errors.ValidationError(f"Missing required field: {field}")

    record_id = payload.get("id") or str(uuid4())
    now = _utc_now()
    record = {**payload, "id": record_id, "created_at": now, "updated_at": now}

    try:
        await repository.insert_row(config.table, record)
        row = await repository.get_row(config.table, record_id)
    except db.DRIVER_ERRORS as exc:
        raise errors.from_database_error(exc, table=config.table, operation="create") from exc

    logger.info("record_created table=%s id=%s", config.table, record_id)
    # A trigger may rewrite the key; fall back to what was sent.
    return row if row is not None else record


async def update_record(config: ResourceConfig, record_id: str, payload: dict[str, Any]) -> dict:
    try:
        exists = await repository.row_exists(config.table, record_id)
    except db.DRIVER_ERRORS as exc:
        raise errors.from_database_error(exc, table=config.table, operation="update") from exc
    if not exists:
        raise _not_found(config)

    updates = {
        key: value
        for key, value in payload.items()
        if key not in IMMUTABLE_COLUMNS and key not in SERVER_STAMPED_COLUMNS
    }
    if not updates:
        raise errors.ValidationError("No fields to update", code="EMPTY_UPDATE")
    updates["updated_at"] = _utc_now()

    try:
        await repository.update_row(config.table, record_id, updates)
        row = await repository.get_row(config.table, record_id)
    except db.DRIVER_ERRORS as exc:
        raise errors.from_database_error(exc, table=config.table, operation="update") from exc

    if row is None:
        raise _not_found(config)
    logger.info("record_updated table=%s id=%s columns=%s", config.table, record_id, sorted(updates))
    return row


async def delete_record(config: ResourceConfig, record_id: str) -> dict:
    try:
        exists = await repository.row_exists(config.table, record_id)
        if not exists:
            raise _not_found(config)
        await repository.delete_row(config.table, record_id)
    except db.DRIVER_ERRORS as exc:
        raise errors.from_database_error(exc, table=config.table, operation="delete") from exc

    logger.info("record_deleted table=%s id=%s", config.table, record_id)
    return {"success": True, "id": record_id, "message": f"{config.table} record deleted"}
