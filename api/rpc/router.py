"""
RPC endpoint: call a registered SQL function with the body as named arguments.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Body

from core import db, errors

from . import repository
from .registry import RpcRegistry, default_registry

logger = logging.getLogger(__name__)


def build_router(registry: RpcRegistry = default_registry) -> APIRouter:
    router = APIRouter(prefix="/rpc", tags=["rpc"])

    @router.get("", response_model=None)
    async def list_functions() -> dict:
        return {"functions": registry.names()}

    @router.post("/{name}", response_model=None)
    async def call(name: str, arguments: dict[str, Any] | None = Body(default=None)) -> Any:
        fn = registry.get(name)
        if fn is None:
            raise errors.NotFoundError(f"Unknown function: {name}", code="UNKNOWN_FUNCTION")

        arguments = arguments or {}
        problem = fn.check_arguments(arguments)
        if problem is not None:
            raise errors.BadRequestError(problem, code="INVALID_ARGUMENTS")

        try:
            result = await repository.call_function(fn, arguments)
        except db.DRIVER_ERRORS as exc:
            raise errors.from_database_error(exc, table=fn.sql_function, operation="rpc") from exc

        logger.info("rpc_called name=%s args=%s", name, sorted(arguments))
        return result

    return router
