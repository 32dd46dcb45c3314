"""
Route descriptors: how each logical table maps onto the REST surface.

`data_key` says where rows live in a list response: "root" means the
response body is the array itself, anything else names the field holding
it. Tables missing from `ROUTE_MAP` fail fast instead of issuing a request.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType

API_PREFIX = "/api/v1"
ROOT = "root"

# Paging/ordering options the list routes accept.
_PAGING = ("limit", "offset", "order_by")


@dataclass(frozen=True)
class RouteDescriptor:
    base_path: str
    data_key: str = ROOT
    filter_params: frozenset[str] = frozenset()
    supports_get_by_id: bool = True
    supports_delete: bool = False


def _route(
    path: str,
    *filters: str,
    data_key: str = ROOT,
    supports_get_by_id: bool = True,
    supports_delete: bool = False,
) -> RouteDescriptor:
    return RouteDescriptor(
        base_path=f"{API_PREFIX}{path}",
        data_key=data_key,
        filter_params=frozenset(filters),
        supports_get_by_id=supports_get_by_id,
        supports_delete=supports_delete,
    )


_CONTACTS = _route(
    "/contact-entities",
    "user_id", "stage", "source", "priority", "industry", "loan_type", *_PAGING,
    supports_delete=True,
)

ROUTE_MAP: MappingProxyType[str, RouteDescriptor] = MappingProxyType(
    {
        "leads": _route(
            "/leads",
            "status", "stage", "user_id", "priority", "loan_type", "source", *_PAGING,
            supports_delete=True,
        ),
        # Older callers still say "contacts"; both names hit the same route.
        "contact_entities": _CONTACTS,
        "contacts": _CONTACTS,
        "lenders": _route("/lenders", "status", "lender_type", "user_id", *_PAGING, supports_delete=True),
        "clients": _route("/clients", "status", "user_id", *_PAGING),
        "service_providers": _route(
            "/service-providers", "provider_type", "status", "user_id", *_PAGING, supports_delete=True
        ),
        "profiles": _route("/profiles", "user_id", "role", "is_active", *_PAGING),
        "messages": _route(
            "/messages",
            "user_id", "recipient_id", "lead_id", "is_read", "message_type", *_PAGING,
            supports_delete=True,
        ),
        "tasks": _route(
            "/tasks",
            "user_id", "assigned_to", "lead_id", "status", "priority", "task_type", *_PAGING,
            supports_delete=True,
        ),
        "lead_documents": _route(
            "/lead-documents", "lead_id", "user_id", "document_type", "status", *_PAGING, supports_delete=True
        ),
        "document_templates": _route(
            "/document-templates", "template_type", "is_active", "user_id", *_PAGING, supports_delete=True
        ),
        "document_versions": _route("/document-versions", "document_id", "uploaded_by", *_PAGING),
        "email_accounts": _route("/email-accounts", "user_id", "is_active", *_PAGING, supports_delete=True),
        "approval_requests": _route("/approval-requests", "status", "submitted_by", "record_type", *_PAGING),
        "approval_steps": _route("/approval-steps", "request_id", "approver_id", "status", *_PAGING),
        "audit_logs": _route(
            "/audit-logs",
            "action", "table_name", "user_id", "record_id", *_PAGING,
            data_key="data",
            supports_get_by_id=False,
        ),
    }
)

# Known tables that have no REST route yet.
UNMAPPED_TABLES: tuple[str, ...] = (
    "notifications",
    "email_campaigns",
    "email_campaign_recipients",
    "cases",
    "communities",
)


def get_route(table: str) -> RouteDescriptor | None:
    return ROUTE_MAP.get(table)
