"""
HTTP client entry point: `table()` starts a query, `rpc()` calls a function.

Every terminal call opens its own `httpx.AsyncClient` and performs exactly one
request; nothing is cached between calls.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

from .config import ClientSettings
from .errors import QueryError, UnsupportedResourceError, error_from_response
from .query import QueryBuilder, QueryState, format_value, json_body
from .results import RpcResult
from .routes import get_route
from .rpc_routes import get_rpc_route
from .session import SessionProvider

logger = logging.getLogger(__name__)


class DatabaseClient:
    def __init__(
        self,
        base_url: str,
        *,
        api_key: str | None = None,
        session_provider: SessionProvider | None = None,
        timeout_s: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        base_url = (base_url or "").strip()
        if not base_url:
            raise ValueError("base_url is empty.")
        self._base_url = base_url.rstrip("/")
        self._api_key = (api_key or "").strip()
        self._session_provider = session_provider
        self._timeout_s = timeout_s
        self._transport = transport

    @classmethod
    def from_env(
        cls,
        *,
        session_provider: SessionProvider | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> DatabaseClient:
        settings = ClientSettings.from_env()
        return cls(
            settings.base_url,
            api_key=settings.api_key,
            session_provider=session_provider,
            timeout_s=settings.timeout_s,
            transport=transport,
        )

    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(self, QueryState(table=name, route=get_route(name)))

    # Mirrors the `from(...)` entry point of the builder API.
    from_ = table

    async def _headers(self) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if self._session_provider is not None:
            session = await self._session_provider.get_session()
            if session is not None and session.access_token:
                headers["Authorization"] = f"Bearer {session.access_token}"
        if self._api_key:
            headers["x-api-key"] = self._api_key
        return headers

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        headers = await self._headers()
        async with httpx.AsyncClient(
            base_url=self._base_url,
            timeout=self._timeout_s,
            transport=self._transport,
        ) as client:
            return await client.request(method, path, params=params, json=json, headers=headers)

    async def rpc(self, name: str, params: dict[str, Any] | None = None) -> RpcResult:
        route = get_rpc_route(name)
        if route is None:
            return RpcResult(
                data=None,
                error=UnsupportedResourceError(
                    f'RPC "{name}" has no REST route mapped.',
                    code="UNSUPPORTED_RESOURCE",
                ),
            )

        arguments = params or {}
        try:
            if route.params_in == "query":
                response = await self.send(
                    route.method,
                    route.path,
                    params={k: format_value(v) for k, v in arguments.items() if v is not None} or None,
                )
            else:
                response = await self.send(route.method, route.path, json=json_body(arguments))
        except QueryError as exc:
            return RpcResult(data=None, error=exc)
        except httpx.HTTPError as exc:
            logger.warning("rpc_request_failed name=%s error=%s", name, exc)
            return RpcResult(data=None, error=QueryError(f"Request failed: {exc}"))
        except Exception as exc:
            logger.warning("rpc_failed name=%s error=%r", name, exc)
            return RpcResult(data=None, error=QueryError(str(exc) or type(exc).__name__))

        if response.is_error:
            return RpcResult(data=None, error=error_from_response(response))
        try:
            return RpcResult(data=response.json(), error=None)
        except ValueError:
            return RpcResult(
                data=None,
                error=QueryError("Response is not valid JSON", status=response.status_code),
            )
