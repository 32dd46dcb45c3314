"""
FastAPI route factory for CRUD resources.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Request, status

from . import service
from .config import ResourceConfig


def build_router(config: ResourceConfig) -> APIRouter:
    """
    Build list/get/create/update(/delete) routes for one table.

    Paths are relative ("" and "/{record_id}"); mount the router with a
    prefix such as "/leads". DELETE is only registered when
    `config.allow_delete` is true, so other tables answer 405 for it.
    """
    router = APIRouter()
    table = config.table

    @router.get("", name=f"{table}_list", response_model=None)
    async def list_records(request: Request) -> Any:
        return await service.list_records(config, request.query_params)

    @router.get("/{record_id}", name=f"{table}_get", response_model=None)
    async def get_record(record_id: str) -> dict:
        return await service.get_record(config, record_id)

    @router.post("", name=f"{table}_create", response_model=None, status_code=status.HTTP_201_CREATED)
    async def create_record(payload: dict[str, Any] | None = Body(default=None)) -> dict:
        return await service.create_record(config, payload or {})

    async def update_record(record_id: str, payload: dict[str, Any] | None = Body(default=None)) -> dict:
        return await service.update_record(config, record_id, payload or {})

    # PUT and PATCH share one handler: both merge the body into the row.
    router.add_api_route(
        "/{record_id}",
        update_record,
        methods=["PUT", "PATCH"],
        name=f"{table}_update",
        response_model=None,
    )

    if config.allow_delete:

        @router.delete("/{record_id}", name=f"{table}_delete", response_model=None)
        async def delete_record(record_id: str) -> dict:
            return await service.delete_record(config, record_id)

    return router
