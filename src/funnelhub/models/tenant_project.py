"""Tenant project registry - one row per Supabase-backed marketing site."""

from datetime import datetime
from typing import Any
from uuid import UUID, uuid7

from sqlalchemy import Column
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel

from src.funnelhub.core.validators import MAX_TENANT_SLUG_LENGTH
from src.funnelhub.models.base import utc_now
from src.funnelhub.models.enums import AnalyticsFlavor


class TenantProject(SQLModel, table=True):
    __tablename__ = "tenant_projects"
    __table_args__ = {"schema": "public"}

    id: UUID = Field(default_factory=uuid7, primary_key=True)
    name: str = Field(max_length=100, index=True)
    slug: str = Field(max_length=MAX_TENANT_SLUG_LENGTH, unique=True, index=True)

    # Supabase project
    rest_url: str = Field(max_length=255)
    anon_key: str = Field(max_length=2048)

    analytics_flavor: str = Field(default=AnalyticsFlavor.SESSION_TABLES.value, max_length=30)
    # Per-tenant table/column renames layered over the flavor's defaults
    schema_overrides: dict[str, Any] | None = Field(
        default=None,
        sa_column=Column(JSONB, nullable=True),
    )

    color: str | None = Field(default=None, max_length=20)  # dashboard accent
    is_active: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def flavor(self) -> AnalyticsFlavor:
        return AnalyticsFlavor(self.analytics_flavor)
