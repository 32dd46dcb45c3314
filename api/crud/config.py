"""
Declarative configuration for one CRUD resource.
"""

from __future__ import annotations

from dataclasses import dataclass

from core.sql import is_identifier

ABSOLUTE_MAX_LIMIT = 500


@dataclass(frozen=True)
class ResourceConfig:
    table: str
    filter_params: tuple[str, ...] = ()
    required_fields: tuple[str, ...] = ()
    allow_delete: bool = False
    # Columns matched with ILIKE when the list route receives `search=`.
    search_fields: tuple[str, ...] = ()
    # List responses become {"data": [...], "count": n} instead of a bare array.
    envelope: bool = False
    default_limit: int = 100
    max_limit: int = ABSOLUTE_MAX_LIMIT

    def __post_init__(self) -> None:
        names = (self.table, *self.filter_params, *self.required_fields, *self.search_fields)
        bad = [name for name in names if not is_identifier(name)]
        if bad:
            raise ValueError(f"Invalid identifier(s) in resource config: {', '.join(bad)}")
        if not 1 <= self.max_limit <= ABSOLUTE_MAX_LIMIT:
            raise ValueError(f"max_limit must be between 1 and {ABSOLUTE_MAX_LIMIT}.")
        if not 1 <= self.default_limit <= self.max_limit:
            raise ValueError("default_limit must be between 1 and max_limit.")
