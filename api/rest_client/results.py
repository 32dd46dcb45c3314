"""
Result pairs returned by terminal calls. They unpack as `data, error`.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from .errors import QueryError


@dataclass(frozen=True)
class QueryResult:
    data: list[dict[str, Any]] | None
    error: QueryError | None
    count: int | None = None

    def __iter__(self) -> Iterator[Any]:
        yield self.data
        yield self.error


@dataclass(frozen=True)
class SingleResult:
    data: dict[str, Any] | None
    error: QueryError | None

    def __iter__(self) -> Iterator[Any]:
        yield self.data
        yield self.error


@dataclass(frozen=True)
class RpcResult:
    data: Any
    error: QueryError | None

    def __iter__(self) -> Iterator[Any]:
        yield self.data
        yield self.error
