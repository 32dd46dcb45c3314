"""
SQL function invocation (raw SQL, named arguments).
"""

from __future__ import annotations

from typing import Any

from core import db
from core.sql import ParamList, quote_ident, to_param

from .registry import RpcFunction


def build_call(fn: RpcFunction, arguments: dict[str, Any]) -> tuple[str, list[Any]]:
    params = ParamList()
    # Declared order, so the statement text is stable for a given argument set.
    named = [
        f"{quote_ident(p.name)} => {params.add(to_param(arguments[p.name]))}"
        for p in fn.params
        if p.name in arguments
    ]
    sql = f"SELECT * FROM {quote_ident(fn.sql_function)}({', '.join(named)})"
    return sql, params.values


async def call_function(fn: RpcFunction, arguments: dict[str, Any]) -> Any:
    sql, values = build_call(fn, arguments)
    rows = await db.fetch_all(sql, *values)

    if fn.returns == "rows":
        return rows
    if not rows:
        return None
    if fn.returns == "row":
        return rows[0]
    # Scalar functions come back as a single column named after the function.
    return next(iter(rows[0].values()), None)
