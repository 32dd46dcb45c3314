"""Shared fixtures: a scripted stand-in for `core.db` and an app client."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any

import pytest
from fastapi.testclient import TestClient

from core import db


@dataclass
class Call:
    kind: str
    sql: str
    args: tuple[Any, ...]


@dataclass
class FakeDatabase:
    """Records every statement and answers from a queue of scripted results.

    Queue items are returned in order regardless of call kind; an exception
    instance is raised instead of returned. With an empty queue, fetch_all
    returns [], fetch_one returns None and execute returns "OK".
    """

    calls: list[Call] = field(default_factory=list)
    results: deque[Any] = field(default_factory=deque)

    def script(self, *results: Any) -> None:
        self.results.extend(results)

    def _next(self, default: Any) -> Any:
        if not self.results:
            return default
        result = self.results.popleft()
        if isinstance(result, BaseException):
            raise result
        return result

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        self.calls.append(Call("fetch_one", sql, args))
        return self._next(None)

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        self.calls.append(Call("fetch_all", sql, args))
        return self._next([])

    async def execute(self, sql: str, *args: Any) -> str:
        self.calls.append(Call("execute", sql, args))
        return self._next("OK")

    def statements(self, kind: str | None = None) -> list[Call]:
        return [c for c in self.calls if kind is None or c.kind == kind]


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeDatabase:
    fake = FakeDatabase()
    monkeypatch.setattr(db, "fetch_one", fake.fetch_one)
    monkeypatch.setattr(db, "fetch_all", fake.fetch_all)
    monkeypatch.setattr(db, "execute", fake.execute)
    return fake


@pytest.fixture
def client(fake_db: FakeDatabase, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    monkeypatch.delenv("CRM_API_KEY", raising=False)
    from main import create_app

    # Not used as a context manager: the lifespan (real pool) never starts.
    return TestClient(create_app())
