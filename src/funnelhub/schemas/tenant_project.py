from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.funnelhub.core.validators import (
    MAX_TENANT_SLUG_LENGTH,
    validate_http_url,
    validate_tenant_slug,
)
from src.funnelhub.models import AnalyticsFlavor, TenantProject

_OVERRIDE_KEYS = {"tables", "columns"}


def _validate_overrides(v: dict[str, Any] | None) -> dict[str, Any] | None:
    if v is None:
        return None
    unknown = set(v) - _OVERRIDE_KEYS
    if unknown:
        raise ValueError(f"Unknown schema override sections: {', '.join(sorted(unknown))}")
    tables = v.get("tables", {})
    if not isinstance(tables, dict) or not all(isinstance(t, str) for t in tables.values()):
        raise ValueError("'tables' must map entity names to table names")
    columns = v.get("columns", {})
    if not isinstance(columns, dict) or not all(
        isinstance(m, dict) and all(isinstance(c, str) for c in m.values())
        for m in columns.values()
    ):
        raise ValueError("'columns' must map entity names to {field: column} objects")
    return v


class TenantProjectCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    slug: str = Field(
        min_length=1,
        max_length=MAX_TENANT_SLUG_LENGTH,
        json_schema_extra={"examples": ["topic-mingle", "offer-grab-zone"]},
    )
    rest_url: str = Field(
        max_length=255,
        json_schema_extra={"examples": ["https://abcdefgh.supabase.co"]},
    )
    anon_key: str = Field(min_length=1, max_length=2048)
    analytics_flavor: AnalyticsFlavor = AnalyticsFlavor.SESSION_TABLES
    schema_overrides: dict[str, Any] | None = Field(
        default=None,
        json_schema_extra={
            "examples": [
                {
                    "tables": {"link_clicks": "click_tracking"},
                    "columns": {"link_clicks": {"timestamp": "timestamp"}},
                }
            ]
        },
    )
    color: str | None = Field(default=None, max_length=20)
    is_active: bool = True

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Name cannot be empty or whitespace only")
        return v

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str) -> str:
        return validate_tenant_slug(v)

    @field_validator("rest_url")
    @classmethod
    def validate_rest_url(cls, v: str) -> str:
        return validate_http_url(v)

    @field_validator("schema_overrides")
    @classmethod
    def validate_overrides(cls, v: dict[str, Any] | None) -> dict[str, Any] | None:
        return _validate_overrides(v)


class TenantProjectUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    rest_url: str | None = Field(default=None, max_length=255)
    anon_key: str | None = Field(default=None, min_length=1, max_length=2048)
    analytics_flavor: AnalyticsFlavor | None = None
    schema_overrides: dict[str, Any] | None = None
    color: str | None = Field(default=None, max_length=20)
    is_active: bool | None = None

    @field_validator("rest_url")
    @classmethod
    def validate_rest_url(cls, v: str | None) -> str | None:
        return validate_http_url(v) if v is not None else None

    @field_validator("schema_overrides")
    @classmethod
    def validate_overrides(cls, v: dict[str, Any] | None) -> dict[str, Any] | None:
        return _validate_overrides(v)


def mask_key(key: str) -> str:
    return f"...{key[-4:]}" if len(key) > 4 else "****"


class TenantProjectRead(BaseModel):
    """Registry entry as returned by the API. The anon key is never echoed in full."""

    id: UUID
    name: str
    slug: str
    rest_url: str
    anon_key_hint: str
    analytics_flavor: AnalyticsFlavor
    schema_overrides: dict[str, Any] | None
    color: str | None
    is_active: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_model(cls, project: TenantProject) -> "TenantProjectRead":
        return cls(
            id=project.id,
            name=project.name,
            slug=project.slug,
            rest_url=project.rest_url,
            anon_key_hint=mask_key(project.anon_key),
            analytics_flavor=project.flavor,
            schema_overrides=project.schema_overrides,
            color=project.color,
            is_active=project.is_active,
            created_at=project.created_at,
            updated_at=project.updated_at,
        )
