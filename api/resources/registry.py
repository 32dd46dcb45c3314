"""
Static list of mounted resources: one `ResourceConfig` per table.

Filter and required fields mirror what each table's list/create calls need;
anything table-specific beyond that lives in the database schema.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter

from crud import ResourceConfig, build_router

logger = logging.getLogger(__name__)

RESOURCES: tuple[tuple[str, ResourceConfig], ...] = (
    (
        "/leads",
        ResourceConfig(
            table="leads",
            filter_params=("status", "stage", "user_id", "priority", "loan_type", "source"),
            required_fields=("contact_entity_id", "user_id"),
            allow_delete=True,
        ),
    ),
    (
        "/contact-entities",
        ResourceConfig(
            table="contact_entities",
            filter_params=("user_id", "stage", "source", "priority", "industry", "loan_type"),
            required_fields=("name", "email", "user_id"),
            allow_delete=True,
            search_fields=("name", "email", "business_name"),
        ),
    ),
    (
        "/lenders",
        ResourceConfig(
            table="lenders",
            filter_params=("status", "lender_type", "user_id"),
            required_fields=("name",),
            allow_delete=True,
            search_fields=("name", "contact_name", "email"),
        ),
    ),
    (
        "/clients",
        ResourceConfig(
            table="clients",
            filter_params=("status", "user_id"),
            required_fields=("user_id",),
        ),
    ),
    (
        "/service-providers",
        ResourceConfig(
            table="service_providers",
            filter_params=("provider_type", "status", "user_id"),
            required_fields=("name",),
            allow_delete=True,
            search_fields=("name", "contact_name", "email"),
        ),
    ),
    (
        "/profiles",
        ResourceConfig(
            table="profiles",
            filter_params=("user_id", "role", "is_active"),
            required_fields=("user_id",),
        ),
    ),
    (
        "/messages",
        ResourceConfig(
            table="messages",
            filter_params=("user_id", "recipient_id", "lead_id", "is_read", "message_type"),
            required_fields=("user_id",),
            allow_delete=True,
        ),
    ),
    (
        "/tasks",
        ResourceConfig(
            table="tasks",
            filter_params=("user_id", "assigned_to", "lead_id", "status", "priority", "task_type"),
            required_fields=("user_id", "title"),
            allow_delete=True,
            search_fields=("title", "description"),
        ),
    ),
    (
        "/lead-documents",
        ResourceConfig(
            table="lead_documents",
            filter_params=("lead_id", "user_id", "document_type", "status"),
            required_fields=("document_name",),
            allow_delete=True,
        ),
    ),
    (
        "/document-templates",
        ResourceConfig(
            table="document_templates",
            filter_params=("template_type", "is_active", "user_id"),
            required_fields=("name",),
            allow_delete=True,
        ),
    ),
    (
        "/document-versions",
        ResourceConfig(
            table="document_versions",
            filter_params=("document_id", "uploaded_by"),
            required_fields=("document_id",),
        ),
    ),
    (
        "/email-accounts",
        ResourceConfig(
            table="email_accounts",
            filter_params=("user_id", "is_active"),
            required_fields=("user_id", "email_address"),
            allow_delete=True,
        ),
    ),
    (
        "/approval-requests",
        ResourceConfig(
            table="approval_requests",
            filter_params=("status", "submitted_by", "record_type"),
            required_fields=("submitted_by", "record_id", "record_type"),
        ),
    ),
    (
        "/approval-steps",
        ResourceConfig(
            table="approval_steps",
            filter_params=("request_id", "approver_id", "status"),
            required_fields=("request_id", "step_number", "approver_id"),
        ),
    ),
    (
        "/audit-logs",
        ResourceConfig(
            table="audit_logs",
            filter_params=("action", "table_name", "user_id", "record_id"),
            required_fields=("action",),
            envelope=True,
        ),
    ),
)


def mount_resources(router: APIRouter) -> None:
    for path, config in RESOURCES:
        router.include_router(build_router(config), prefix=path, tags=[path.strip("/")])
    logger.info("resources_mounted count=%s", len(RESOURCES))
