"""
RPC name -> endpoint mapping used by `DatabaseClient.rpc`.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Literal

from .routes import API_PREFIX


@dataclass(frozen=True)
class RpcRoute:
    method: Literal["GET", "POST"]
    path: str
    params_in: Literal["body", "query"] = "body"


def _call(name: str) -> RpcRoute:
    return RpcRoute(method="POST", path=f"{API_PREFIX}/rpc/{name}")


RPC_ROUTE_MAP: MappingProxyType[str, RpcRoute] = MappingProxyType(
    {
        "get_user_role": _call("get_user_role"),
        "is_email_verified": _call("is_email_verified"),
        "get_accessible_leads": _call("get_accessible_leads"),
        "get_dashboard_metrics": _call("get_dashboard_metrics"),
        "get_pipeline_analytics": _call("get_pipeline_analytics"),
        "increment_template_usage": _call("increment_template_usage"),
        "list_functions": RpcRoute(method="GET", path=f"{API_PREFIX}/rpc", params_in="query"),
    }
)


def get_rpc_route(name: str) -> RpcRoute | None:
    return RPC_ROUTE_MAP.get(name)
