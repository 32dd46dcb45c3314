"""
Small helpers for building parameterized SQL (asyncpg placeholders).

Values are always bound through `ParamList`; only identifiers that passed
`is_identifier` / `is_order_column` (or were quoted with `quote_ident`) are
ever interpolated into statement text.
"""

from __future__ import annotations

import json
import re
from typing import Any

_ORDER_COLUMN_RE = re.compile(r"^[a-z_]+$", re.IGNORECASE)
_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ParamList:
    """
    Collects bound values and hands out `$n` placeholders in order.
    """

    def __init__(self) -> None:
        self._values: list[Any] = []

    def add(self, value: Any) -> str:
        self._values.append(value)
        return f"${len(self._values)}"

    @property
    def values(self) -> list[Any]:
        return list(self._values)

    def __len__(self) -> int:
        return len(self._values)


def quote_ident(name: str) -> str:
    return '"' + name.replace('"', '""') + '"'


def is_identifier(name: str) -> bool:
    return bool(_IDENTIFIER_RE.match(name or ""))


def is_order_column(name: str | None) -> bool:
    # Column names for ORDER BY cannot be bound, so the accepted shape is narrow.
    return bool(name) and bool(_ORDER_COLUMN_RE.match(name))


def to_param(value: Any) -> Any:
    """
    Serialize objects to JSON text once, so json/jsonb and text columns both
    accept them. Lists are left to the driver: array columns bind them
    natively and the json codec in `core.db` serializes them for json columns.
    """
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=True, default=str)
    return value
