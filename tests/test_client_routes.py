"""Route descriptor lookups for the client."""

from __future__ import annotations

import pytest

from rest_client import ROUTE_MAP, RPC_ROUTE_MAP, UNMAPPED_TABLES, get_route, get_rpc_route
from rest_client.routes import ROOT


class TestRouteMap:
    def test_leads_descriptor(self) -> None:
        route = get_route("leads")
        assert route.base_path == "/api/v1/leads"
        assert route.data_key == ROOT
        assert {"status", "stage", "user_id", "limit"} <= route.filter_params
        assert route.supports_delete

    def test_aliases_share_a_route(self) -> None:
        assert get_route("contacts") is get_route("contact_entities")

    def test_enveloped_route(self) -> None:
        route = get_route("audit_logs")
        assert route.data_key == "data"
        assert not route.supports_get_by_id

    @pytest.mark.parametrize("table", UNMAPPED_TABLES)
    def test_unmapped_tables_have_no_route(self, table: str) -> None:
        assert get_route(table) is None

    def test_map_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            ROUTE_MAP["new_table"] = get_route("leads")  # type: ignore[index]

    def test_every_path_is_versioned(self) -> None:
        assert all(r.base_path.startswith("/api/v1/") for r in ROUTE_MAP.values())


class TestRpcRouteMap:
    def test_calls_are_posts(self) -> None:
        route = get_rpc_route("get_dashboard_metrics")
        assert route.method == "POST"
        assert route.path == "/api/v1/rpc/get_dashboard_metrics"
        assert route.params_in == "body"

    def test_listing_is_a_get(self) -> None:
        assert RPC_ROUTE_MAP["list_functions"].method == "GET"

    def test_unknown(self) -> None:
        assert get_rpc_route("pg_sleep") is None
