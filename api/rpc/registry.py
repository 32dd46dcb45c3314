"""
Explicit registry of server-side SQL functions callable over HTTP.

Only functions registered here are reachable from `POST /rpc/{name}`, and
only with their declared argument names.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from core.sql import is_identifier

ReturnShape = Literal["rows", "row", "scalar"]


@dataclass(frozen=True)
class RpcParam:
    name: str
    required: bool = True


@dataclass(frozen=True)
class RpcFunction:
    name: str
    sql_function: str
    params: tuple[RpcParam, ...] = ()
    returns: ReturnShape = "rows"

    def __post_init__(self) -> None:
        names = [self.name, self.sql_function, *(p.name for p in self.params)]
        bad = [n for n in names if not is_identifier(n)]
        if bad:
            raise ValueError(f"Invalid identifier(s) in RPC function: {', '.join(bad)}")

    @property
    def param_names(self) -> frozenset[str]:
        return frozenset(p.name for p in self.params)

    def check_arguments(self, arguments: dict) -> str | None:
        """
        Return a problem description, or None when `arguments` fit the signature.
        """
        unknown = sorted(set(arguments) - self.param_names)
        if unknown:
            return f"Unknown argument(s) for {self.name}: {', '.join(unknown)}"
        missing = [p.name for p in self.params if p.required and arguments.get(p.name) is None]
        if missing:
            return f"Missing required argument(s) for {self.name}: {', '.join(missing)}"
        return None


class RpcRegistry:
    def __init__(self, functions: tuple[RpcFunction, ...] = ()) -> None:
        self._functions: dict[str, RpcFunction] = {}
        for fn in functions:
            self.register(fn)

    def register(self, fn: RpcFunction) -> None:
        if fn.name in self._functions:
            raise ValueError(f"RPC function already registered: {fn.name}")
        self._functions[fn.name] = fn

    def get(self, name: str) -> RpcFunction | None:
        return self._functions.get(name)

    def names(self) -> list[str]:
        return sorted(self._functions)


DEFAULT_FUNCTIONS: tuple[RpcFunction, ...] = (
    RpcFunction(
        name="get_user_role",
        sql_function="get_user_role",
        params=(RpcParam("p_user_id"),),
        returns="scalar",
    ),
    RpcFunction(
        name="is_email_verified",
        sql_function="is_email_verified",
        params=(RpcParam("p_user_id"),),
        returns="scalar",
    ),
    RpcFunction(
        name="get_accessible_leads",
        sql_function="get_accessible_leads",
        params=(RpcParam("p_user_id", required=False),),
    ),
    RpcFunction(
        name="get_dashboard_metrics",
        sql_function="get_dashboard_metrics",
        params=(RpcParam("p_user_id"), RpcParam("p_period", required=False)),
        returns="row",
    ),
    RpcFunction(
        name="get_pipeline_analytics",
        sql_function="get_pipeline_analytics",
        params=(RpcParam("p_user_id"),),
    ),
    RpcFunction(
        name="increment_template_usage",
        sql_function="increment_template_usage",
        params=(RpcParam("p_template_id"),),
        returns="scalar",
    ),
)

default_registry = RpcRegistry(DEFAULT_FUNCTIONS)
