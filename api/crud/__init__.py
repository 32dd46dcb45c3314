"""
Generic CRUD routes over a single table.

Usage:
    from crud import ResourceConfig, build_router

    router = build_router(
        ResourceConfig(
            table="lenders",
            filter_params=("status", "lender_type"),
            required_fields=("name",),
            allow_delete=True,
        )
    )
"""

from .config import ResourceConfig
from .router import build_router

__all__ = ["ResourceConfig", "build_router"]
