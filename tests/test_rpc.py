"""RPC registry, statement building and the /rpc routes."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from rpc.registry import RpcFunction, RpcParam, RpcRegistry, default_registry
from rpc.repository import build_call


class TestRegistry:
    def test_rejects_unsafe_names(self) -> None:
        with pytest.raises(ValueError):
            RpcFunction(name="drop", sql_function="x; drop table leads")
        with pytest.raises(ValueError):
            RpcFunction(name="ok", sql_function="ok", params=(RpcParam("bad-name"),))

    def test_duplicate_registration_fails(self) -> None:
        fn = RpcFunction(name="f", sql_function="f")
        registry = RpcRegistry((fn,))
        with pytest.raises(ValueError):
            registry.register(fn)

    def test_argument_checks(self) -> None:
        fn = RpcFunction(
            name="metrics",
            sql_function="metrics",
            params=(RpcParam("p_user_id"), RpcParam("p_period", required=False)),
        )
        assert fn.check_arguments({"p_user_id": "u1"}) is None
        assert "p_user_id" in fn.check_arguments({"p_period": "week"})
        assert "p_other" in fn.check_arguments({"p_user_id": "u1", "p_other": 1})

    def test_default_registry_names_are_sorted(self) -> None:
        names = default_registry.names()
        assert names == sorted(names)
        assert "get_dashboard_metrics" in names


class TestBuildCall:
    def test_named_arguments_in_declared_order(self) -> None:
        fn = default_registry.get("get_dashboard_metrics")
        sql, values = build_call(fn, {"p_period": "month", "p_user_id": "u1"})

        assert sql == 'SELECT * FROM "get_dashboard_metrics"("p_user_id" => $1, "p_period" => $2)'
        assert values == ["u1", "month"]

    def test_no_arguments(self) -> None:
        fn = default_registry.get("get_accessible_leads")
        sql, values = build_call(fn, {})
        assert sql == 'SELECT * FROM "get_accessible_leads"()'
        assert values == []


class TestRpcRoutes:
    def test_lists_functions(self, client: TestClient) -> None:
        resp = client.get("/api/v1/rpc")
        assert resp.json() == {"functions": default_registry.names()}

    def test_unknown_function_is_404(self, client: TestClient, fake_db) -> None:
        resp = client.post("/api/v1/rpc/pg_sleep", json={})
        assert resp.status_code == 404
        assert resp.json()["error"]["code"] == "UNKNOWN_FUNCTION"
        assert fake_db.calls == []

    def test_bad_arguments_are_400(self, client: TestClient, fake_db) -> None:
        resp = client.post("/api/v1/rpc/get_user_role", json={"user": "u1"})
        assert resp.status_code == 400
        assert resp.json()["error"]["code"] == "INVALID_ARGUMENTS"
        assert fake_db.calls == []

    def test_scalar_result(self, client: TestClient, fake_db) -> None:
        fake_db.script([{"get_user_role": "admin"}])
        resp = client.post("/api/v1/rpc/get_user_role", json={"p_user_id": "u1"})

        assert resp.status_code == 200
        assert resp.json() == "admin"
        (call,) = fake_db.calls
        assert call.args == ("u1",)

    def test_row_result(self, client: TestClient, fake_db) -> None:
        fake_db.script([{"total_leads": 4, "won": 1}])
        resp = client.post("/api/v1/rpc/get_dashboard_metrics", json={"p_user_id": "u1"})
        assert resp.json() == {"total_leads": 4, "won": 1}

    def test_empty_row_result_is_null(self, client: TestClient, fake_db) -> None:
        resp = client.post("/api/v1/rpc/get_dashboard_metrics", json={"p_user_id": "u1"})
        assert resp.status_code == 200
        assert resp.json() is None

    def test_rows_result(self, client: TestClient, fake_db) -> None:
        fake_db.script([{"id": "l1"}, {"id": "l2"}])
        resp = client.post("/api/v1/rpc/get_accessible_leads")
        assert resp.json() == [{"id": "l1"}, {"id": "l2"}]
