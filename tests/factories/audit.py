"""Audit log factory."""

from polyfactory import Use

from src.funnelhub.models import AuditAction, AuditLog, AuditStatus
from tests.factories.base import BaseFactory, generate_uuid7, utc_now


class AuditLogFactory(BaseFactory):
    __model__ = AuditLog

    id = Use(generate_uuid7)
    tenant_project_id = None
    action = AuditAction.CONTENT_CREATE.value
    entity_type = "blog"
    entity_id = "1"
    changes = None
    ip_address = "203.0.113.7"
    user_agent = "pytest"
    request_id = None
    status = AuditStatus.SUCCESS.value
    error_message = None
    created_at = Use(utc_now)
