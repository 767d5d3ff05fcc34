"""Audit log of admin changes made through the hub."""

from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid7

from sqlalchemy import Column, Index
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.funnelhub.models.base import utc_now


class AuditAction(str, Enum):
    # Registry
    TENANT_REGISTER = "tenant.register"
    TENANT_UPDATE = "tenant.update"
    TENANT_DELETE = "tenant.delete"

    # Tenant content
    CONTENT_CREATE = "content.create"
    CONTENT_UPDATE = "content.update"
    CONTENT_DELETE = "content.delete"
    CONTENT_BULK = "content.bulk"


class AuditStatus(str, Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class AuditLog(SQLModel, table=True):
    """One admin action. Tenant content lives remotely, so entity ids are text."""

    __tablename__ = "audit_logs"
    __table_args__ = (
        Index("ix_audit_logs_tenant_created", "tenant_project_id", "created_at"),
        Index("ix_audit_logs_action_created", "action", "created_at"),
        Index("ix_audit_logs_entity", "entity_type", "entity_id"),
        {"schema": "public"},
    )

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    tenant_project_id: UUID | None = Field(
        default=None, foreign_key="public.tenant_projects.id", ondelete="SET NULL"
    )

    action: str = Field(max_length=50)  # AuditAction value
    entity_type: str = Field(max_length=50)  # "tenant_project", "blog", "web_result", ...
    entity_id: str | None = Field(default=None, max_length=100)

    changes: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSONB, nullable=True),
    )

    ip_address: str | None = Field(max_length=45, default=None)
    user_agent: str | None = Field(max_length=500, default=None)
    request_id: str | None = Field(max_length=36, default=None)

    status: str = Field(default=AuditStatus.SUCCESS.value, max_length=20)
    error_message: str | None = Field(max_length=1000, default=None)

    created_at: datetime = Field(default_factory=utc_now)
