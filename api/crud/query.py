"""
Translation of list-route query parameters into SQL fragments.

Parsing is pure: it returns a `ListQuery` describing the WHERE clause, bound
values, ordering and paging, plus the parameters it deliberately ignored so
the caller can log them.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from core.sql import ParamList, is_order_column, quote_ident

from .config import ResourceConfig

DEFAULT_ORDER_COLUMN = "created_at"


@dataclass(frozen=True)
class IgnoredParam:
    name: str
    value: str
    reason: str


@dataclass(frozen=True)
class ListQuery:
    where: str
    values: list[Any]
    order_column: str
    order_direction: str
    limit: int
    offset: int
    ignored: tuple[IgnoredParam, ...] = field(default_factory=tuple)

    def to_sql(self, table: str) -> str:
        return (
            f"SELECT * FROM {quote_ident(table)} WHERE {self.where}"
            f" ORDER BY {quote_ident(self.order_column)} {self.order_direction}"
            f" LIMIT {self.limit} OFFSET {self.offset}"
        )


def _parse_int(raw: str | None) -> int | None:
    if raw is None:
        return None
    try:
        return int(raw.strip())
    except ValueError:
        return None


def parse_limit(raw: str | None, config: ResourceConfig) -> int:
    value = _parse_int(raw)
    if value is None or value < 1:
        return config.default_limit
    return min(value, config.max_limit)


def parse_offset(raw: str | None) -> int:
    value = _parse_int(raw)
    if value is None or value < 0:
        return 0
    return value


def parse_list_query(config: ResourceConfig, query: Mapping[str, str]) -> ListQuery:
    params = ParamList()
    conditions = ["1=1"]
    ignored: list[IgnoredParam] = []

    for name in config.filter_params:
        value = query.get(name)
        if value is None:
            continue
        # Query-string values are text; compare as text so boolean/uuid/int
        # columns match their canonical text form.
        conditions.append(f"{quote_ident(name)}::text = {params.add(value)}")

    term = (query.get("search") or "").strip()
    if term:
        if config.search_fields:
            placeholder = params.add(f"%{term}%")
            parts = [f"{quote_ident(col)}::text ILIKE {placeholder}" for col in config.search_fields]
            conditions.append("(" + " OR ".join(parts) + ")")
        else:
            ignored.append(IgnoredParam("search", term, "resource has no search fields"))

    direction = "ASC" if (query.get("order_dir") or "").lower() == "asc" else "DESC"
    order_by = query.get("order_by")
    if order_by is None or order_by == "":
        order_column = DEFAULT_ORDER_COLUMN
    elif is_order_column(order_by):
        order_column = order_by
    else:
        ignored.append(IgnoredParam("order_by", order_by, "not a plain column name"))
        order_column = DEFAULT_ORDER_COLUMN
        direction = "DESC"

    return ListQuery(
        where=" AND ".join(conditions),
        values=params.values,
        order_column=order_column,
        order_direction=direction,
        limit=parse_limit(query.get("limit"), config),
        offset=parse_offset(query.get("offset")),
        ignored=tuple(ignored),
    )
