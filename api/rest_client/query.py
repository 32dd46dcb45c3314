"""
Chainable, immutable query builder translated into one REST call.

Each chain method returns a new builder over a new `QueryState`; nothing is
sent until a terminal call (`await builder`, `single()`, `maybe_single()`).

Translation rules, per operation:
- select  -> GET  base/{id} when `eq("id", ...)` is present and the route
             supports it, otherwise GET base?<allowed eq filters>
- insert  -> POST base
- update  -> PUT  base/{id}   (requires `eq("id", ...)`)
- delete  -> DELETE base/{id} (requires `eq("id", ...)` and route support)

The list route only understands equality on the columns its descriptor
declares; every filter or option that cannot be sent is recorded as an
`IgnoredParam` on the plan and logged.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Generator, Sequence
from dataclasses import dataclass, field, replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Literal, Protocol
from urllib.parse import quote
from uuid import UUID

import httpx

from .errors import QueryError, UnsupportedResourceError, error_from_response
from .results import QueryResult, SingleResult
from .routes import ROOT, RouteDescriptor

logger = logging.getLogger(__name__)

Operation = Literal["select", "insert", "update", "delete"]
FilterKind = Literal["eq", "neq", "gt", "gte", "lt", "lte", "like", "ilike", "in", "is", "not"]


@dataclass(frozen=True)
class Filter:
    kind: FilterKind
    column: str
    value: Any


@dataclass(frozen=True)
class OrderSpec:
    column: str
    ascending: bool = True


@dataclass(frozen=True)
class QueryState:
    table: str
    route: RouteDescriptor | None
    operation: Operation = "select"
    columns: str = "*"
    filters: tuple[Filter, ...] = ()
    order: OrderSpec | None = None
    limit: int | None = None
    range_from: int | None = None
    range_to: int | None = None
    data: Any = None


@dataclass(frozen=True)
class IgnoredParam:
    name: str
    value: str
    reason: str


@dataclass(frozen=True)
class RequestPlan:
    method: str
    path: str
    params: dict[str, str] = field(default_factory=dict)
    json: Any = None
    # True when the endpoint answers with one object rather than a row list.
    single_object: bool = False
    data_key: str = ROOT
    ignored: tuple[IgnoredParam, ...] = ()


class RequestSender(Protocol):
    async def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response: ...


def format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _id_filter(state: QueryState) -> str | None:
    for f in state.filters:
        if f.kind == "eq" and f.column == "id" and f.value is not None:
            return format_value(f.value)
    return None


def _item_path(route: RouteDescriptor, record_id: str) -> str:
    return f"{route.base_path}/{quote(record_id, safe='')}"


def _list_params(state: QueryState, route: RouteDescriptor) -> tuple[dict[str, str], list[IgnoredParam]]:
    allowed = route.filter_params
    params: dict[str, str] = {}
    ignored: list[IgnoredParam] = []

    for f in state.filters:
        if f.kind != "eq":
            ignored.append(IgnoredParam(f.column, f"{f.kind}:{f.value!r}", "only equality filters are sent"))
        elif f.column not in allowed:
            ignored.append(IgnoredParam(f.column, repr(f.value), "column is not a filter of this route"))
        elif f.value is None:
            ignored.append(IgnoredParam(f.column, "None", "null equality is not expressible"))
        else:
            params[f.column] = format_value(f.value)

    limit = state.limit
    if state.range_from is not None and state.range_to is not None:
        if "offset" in allowed:
            params["offset"] = str(state.range_from)
        else:
            ignored.append(IgnoredParam("offset", str(state.range_from), "route does not accept offset"))
        if limit is None:
            limit = state.range_to - state.range_from + 1

    if limit is not None and limit <= 0:
        ignored.append(IgnoredParam("limit", str(limit), "non-positive limit is not sent"))
    elif limit is not None:
        if "limit" in allowed:
            params["limit"] = str(limit)
        else:
            ignored.append(IgnoredParam("limit", str(limit), "route does not accept limit"))

    if state.order is not None:
        if "order_by" in allowed:
            params["order_by"] = state.order.column
            params["order_dir"] = "asc" if state.order.ascending else "desc"
        else:
            ignored.append(IgnoredParam("order_by", state.order.column, "route does not accept ordering"))

    return params, ignored


def _json_default(value: Any) -> Any:
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def json_body(data: Any) -> Any:
    """
    Normalize a row to plain JSON values (datetimes become ISO strings).
    """
    try:
        return json.loads(json.dumps(data, default=_json_default))
    except (TypeError, ValueError) as exc:
        raise QueryError(f"Data is not JSON serializable: {exc}", code="BAD_REQUEST") from exc


def _single_row(data: Any) -> dict[str, Any]:
    if isinstance(data, Sequence) and not isinstance(data, (str, bytes)):
        if len(data) != 1:
            raise QueryError("insert accepts exactly one row per request", code="BAD_REQUEST")
        data = data[0]
    if not isinstance(data, dict):
        raise QueryError("insert/update data must be a mapping of column to value", code="BAD_REQUEST")
    return data


def build_request(state: QueryState) -> RequestPlan:
    """
    Resolve a query state into the single HTTP request it implies.

    Raises `QueryError` when the state cannot be expressed safely.
    """
    route = state.route
    if route is None:
        raise UnsupportedResourceError(
            f'Table "{state.table}" has no REST route mapped. Add it to rest_client.routes.',
            code="UNSUPPORTED_RESOURCE",
        )

    record_id = _id_filter(state)
    column_note: tuple[IgnoredParam, ...] = ()
    if state.columns.strip() not in ("", "*"):
        column_note = (IgnoredParam("select", state.columns, "routes always return every column"),)

    if state.operation == "select":
        if record_id is not None and route.supports_get_by_id:
            others = tuple(
                IgnoredParam(f.column, repr(f.value), "single-item lookup ignores other filters")
                for f in state.filters
                if not (f.kind == "eq" and f.column == "id")
            )
            return RequestPlan(
                method="GET",
                path=_item_path(route, record_id),
                single_object=True,
                ignored=column_note + others,
            )
        params, ignored = _list_params(state, route)
        return RequestPlan(
            method="GET",
            path=route.base_path,
            params=params,
            data_key=route.data_key,
            ignored=column_note + tuple(ignored),
        )

    if state.operation == "insert":
        return RequestPlan(
            method="POST",
            path=route.base_path,
            json=json_body(_single_row(state.data)),
            single_object=True,
        )

    if state.operation == "update":
        if record_id is None:
            raise QueryError('update requires .eq("id", value)', code="BAD_REQUEST")
        if not isinstance(state.data, dict):
            raise QueryError("update data must be a mapping of column to value", code="BAD_REQUEST")
        return RequestPlan(
            method="PUT",
            path=_item_path(route, record_id),
            json=json_body(state.data),
            single_object=True,
        )

    if state.operation == "delete":
        if not route.supports_delete:
            raise QueryError(f'DELETE not supported for "{state.table}"', code="BAD_REQUEST")
        if record_id is None:
            raise QueryError('delete requires .eq("id", value)', code="BAD_REQUEST")
        return RequestPlan(
            method="DELETE",
            path=_item_path(route, record_id),
            single_object=True,
        )

    raise QueryError(f"Unsupported operation: {state.operation}", code="BAD_REQUEST")


def unwrap_rows(body: Any, *, data_key: str, single_object: bool) -> list[dict[str, Any]]:
    if single_object or data_key == ROOT:
        if body is None:
            return []
        return list(body) if isinstance(body, list) else [body]

    rows = body.get(data_key) if isinstance(body, dict) else None
    if rows is None:
        return []
    return list(rows) if isinstance(rows, list) else [rows]


class QueryBuilder:
    def __init__(self, sender: RequestSender, state: QueryState) -> None:
        self._sender = sender
        self._state = state

    @property
    def state(self) -> QueryState:
        return self._state

    def _with(self, **changes: Any) -> QueryBuilder:
        return QueryBuilder(self._sender, replace(self._state, **changes))

    def _filter(self, kind: FilterKind, column: str, value: Any) -> QueryBuilder:
        return self._with(filters=(*self._state.filters, Filter(kind, column, value)))

    # operations

    def select(self, columns: str = "*") -> QueryBuilder:
        # After insert/update/delete this only records the column list, so
        # `.insert(row).select()` still performs the insert.
        if self._state.operation != "select":
            return self._with(columns=columns)
        return self._with(operation="select", columns=columns)

    def insert(self, data: dict[str, Any] | Sequence[dict[str, Any]]) -> QueryBuilder:
        return self._with(operation="insert", data=data)

    def upsert(self, data: dict[str, Any] | Sequence[dict[str, Any]]) -> QueryBuilder:
        # The REST routes have no conflict resolution; this is a plain insert.
        logger.debug("upsert_as_insert table=%s", self._state.table)
        return self.insert(data)

    def update(self, data: dict[str, Any]) -> QueryBuilder:
        return self._with(operation="update", data=data)

    def delete(self) -> QueryBuilder:
        return self._with(operation="delete")

    # filters

    def eq(self, column: str, value: Any) -> QueryBuilder:
        return self._filter("eq", column, value)

    def neq(self, column: str, value: Any) -> QueryBuilder:
        return self._filter("neq", column, value)

    def gt(self, column: str, value: Any) -> QueryBuilder:
        return self._filter("gt", column, value)

    def gte(self, column: str, value: Any) -> QueryBuilder:
        return self._filter("gte", column, value)

    def lt(self, column: str, value: Any) -> QueryBuilder:
        return self._filter("lt", column, value)

    def lte(self, column: str, value: Any) -> QueryBuilder:
        return self._filter("lte", column, value)

    def like(self, column: str, pattern: str) -> QueryBuilder:
        return self._filter("like", column, pattern)

    def ilike(self, column: str, pattern: str) -> QueryBuilder:
        return self._filter("ilike", column, pattern)

    def in_(self, column: str, values: Sequence[Any]) -> QueryBuilder:
        return self._filter("in", column, tuple(values))

    def is_(self, column: str, value: bool | None) -> QueryBuilder:
        return self._filter("is", column, value)

    def not_(self, column: str, operator: str, value: Any) -> QueryBuilder:
        return self._filter("not", column, (operator, value))

    # ordering and paging

    def order(self, column: str, *, ascending: bool = True) -> QueryBuilder:
        return self._with(order=OrderSpec(column, ascending))

    def limit(self, count: int) -> QueryBuilder:
        return self._with(limit=count)

    def range(self, start: int, end: int) -> QueryBuilder:
        return self._with(range_from=start, range_to=end)

    # terminal calls

    def plan(self) -> RequestPlan:
        return build_request(self._state)

    async def _send(self, plan: RequestPlan) -> QueryResult:
        response = await self._sender.send(
            plan.method,
            plan.path,
            params=plan.params or None,
            json=plan.json,
        )
        if response.is_error:
            return QueryResult(data=None, error=error_from_response(response))

        try:
            body = response.json()
        except ValueError:
            return QueryResult(
                data=None,
                error=QueryError("Response is not valid JSON", status=response.status_code),
            )

        rows = unwrap_rows(body, data_key=plan.data_key, single_object=plan.single_object)
        return QueryResult(data=rows, error=None, count=len(rows))

    async def execute(self) -> QueryResult:
        try:
            plan = build_request(self._state)
        except QueryError as exc:
            return QueryResult(data=None, error=exc)

        for item in plan.ignored:
            logger.debug(
                "query_param_ignored table=%s name=%s value=%s reason=%s",
                self._state.table,
                item.name,
                item.value,
                item.reason,
            )

        try:
            return await self._send(plan)
        except httpx.HTTPError as exc:
            logger.warning("query_request_failed table=%s error=%s", self._state.table, exc)
            return QueryResult(data=None, error=QueryError(f"Request failed: {exc}"))
        except Exception as exc:
            # Terminal calls report failures through the result, never by raising.
            logger.warning("query_failed table=%s error=%r", self._state.table, exc)
            return QueryResult(data=None, error=QueryError(str(exc) or type(exc).__name__))

    def __await__(self) -> Generator[Any, None, QueryResult]:
        return self.execute().__await__()

    async def single(self) -> SingleResult:
        result = await self.execute()
        if result.error is not None:
            return SingleResult(data=None, error=result.error)
        if not result.data:
            return SingleResult(data=None, error=QueryError("No rows returned", code="NO_ROWS"))
        return SingleResult(data=result.data[0], error=None)

    async def maybe_single(self) -> SingleResult:
        result = await self.execute()
        if result.error is not None:
            return SingleResult(data=None, error=result.error)
        return SingleResult(data=result.data[0] if result.data else None, error=None)
