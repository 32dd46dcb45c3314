"""
Client for the CRUD REST surface with a chainable query builder.

    client = DatabaseClient.from_env()
    data, error = await client.table("leads").select().eq("status", "won").limit(10)
"""

from .client import DatabaseClient
from .errors import QueryError, UnsupportedResourceError
from .query import QueryBuilder
from .results import QueryResult, RpcResult, SingleResult
from .routes import ROUTE_MAP, UNMAPPED_TABLES, RouteDescriptor, get_route
from .rpc_routes import RPC_ROUTE_MAP, RpcRoute, get_rpc_route
from .session import Session, SessionProvider, StaticSessionProvider

__all__ = [
    "DatabaseClient",
    "QueryBuilder",
    "QueryError",
    "QueryResult",
    "ROUTE_MAP",
    "RPC_ROUTE_MAP",
    "RouteDescriptor",
    "RpcResult",
    "RpcRoute",
    "Session",
    "SessionProvider",
    "SingleResult",
    "StaticSessionProvider",
    "UNMAPPED_TABLES",
    "UnsupportedResourceError",
    "get_route",
    "get_rpc_route",
]
