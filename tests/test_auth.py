"""API key enforcement on the versioned routes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from auth.dependencies import _check_api_key
from core import db, errors


class TestApiKeyCheck:
    def test_unset_key_allows_everything(self) -> None:
        assert _check_api_key(None, "") is None
        assert _check_api_key("anything", "") is None

    @pytest.mark.parametrize("provided", [None, "", "   ", "wrong"])
    def test_rejects_missing_or_wrong_key(self, provided: str | None) -> None:
        with pytest.raises(errors.UnauthorizedError):
            _check_api_key(provided, "s3cret")

    def test_accepts_matching_key_with_whitespace(self) -> None:
        assert _check_api_key(" s3cret ", "s3cret") is None


class TestProtectedRoutes:
    @pytest.fixture(autouse=True)
    def _key(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        # After `client`, which clears the key.
        monkeypatch.setenv("CRM_API_KEY", "s3cret")

    def test_missing_key_is_401(self, client: TestClient) -> None:
        resp = client.get("/api/v1/leads")
        assert resp.status_code == 401
        assert resp.json() == {"error": {"message": "Invalid API key", "code": "UNAUTHORIZED"}}

    def test_wrong_key_never_reaches_the_database(self, client, fake_db) -> None:
        resp = client.post("/api/v1/leads", json={}, headers={"x-api-key": "nope"})
        assert resp.status_code == 401
        assert fake_db.calls == []

    def test_rpc_is_protected_too(self, client: TestClient) -> None:
        assert client.get("/api/v1/rpc").status_code == 401

    def test_correct_key_passes(self, client: TestClient) -> None:
        resp = client.get("/api/v1/leads", headers={"x-api-key": "s3cret"})
        assert resp.status_code == 200

    def test_health_is_open(self, client: TestClient) -> None:
        resp = client.get("/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"


class TestReadiness:
    def test_database_down_is_503(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        async def _down() -> bool:
            return False

        monkeypatch.setattr(db, "ping", _down)
        resp = client.get("/health/ready")
        assert resp.status_code == 503
        assert resp.json() == {"status": "degraded", "database": "down"}

    def test_database_up(self, client: TestClient, monkeypatch: pytest.MonkeyPatch) -> None:
        async def _up() -> bool:
            return True

        monkeypatch.setattr(db, "ping", _up)
        assert client.get("/health/ready").json() == {"status": "ok", "database": "up"}
