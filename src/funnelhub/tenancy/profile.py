"""Schema profiles: how one tenant's tables differ from the canonical shape.

Services speak canonical entity and field names ("related_searches",
"search_text"). A profile maps them to the physical table and column names
of a particular Supabase project, so schema drift between tenants is handled
in one place instead of in every query.
"""

from copy import deepcopy
from typing import Any

from pydantic import BaseModel, Field

from src.funnelhub.models.enums import AnalyticsFlavor

BASE_TABLES: dict[str, str] = {
    "categories": "categories",
    "blogs": "blogs",
    "related_searches": "related_searches",
    "web_results": "web_results",
    "prelandings": "pre_landing_pages",
    "email_captures": "email_captures",
    # analytics
    "events": "analytics",
    "submissions": "email_submissions",
    "sessions": "sessions",
    "page_views": "page_views",
    "clicks": "clicks",
    "link_clicks": "link_tracking",
}

BASE_COLUMNS: dict[str, dict[str, str]] = {
    "web_results": {"url": "target_url"},
}

# Every analytics table exposes its event time as the canonical "timestamp"
FLAVOR_DEFAULTS: dict[AnalyticsFlavor, dict[str, Any]] = {
    AnalyticsFlavor.EVENT_LOG: {
        "columns": {"events": {"timestamp": "created_at"}},
    },
    AnalyticsFlavor.SESSION_SUMMARY: {
        "columns": {"events": {"timestamp": "timestamp"}},
    },
    AnalyticsFlavor.EMAIL_SUBMISSIONS: {
        "columns": {"submissions": {"timestamp": "created_at"}},
    },
    AnalyticsFlavor.SESSION_TABLES: {
        "columns": {
            "sessions": {"timestamp": "created_at"},
            "page_views": {"timestamp": "viewed_at"},
            "clicks": {"timestamp": "clicked_at"},
        },
    },
    AnalyticsFlavor.LINK_TRACKING: {
        "columns": {
            "sessions": {"timestamp": "last_activity", "device": "device_type"},
            "link_clicks": {"timestamp": "clicked_at"},
            "related_searches": {"search_text": "title"},
        },
    },
}


class SchemaProfile(BaseModel):
    flavor: AnalyticsFlavor
    tables: dict[str, str] = Field(default_factory=dict)
    columns: dict[str, dict[str, str]] = Field(default_factory=dict)

    def table(self, entity: str) -> str:
        return self.tables.get(entity, entity)

    def column(self, entity: str, field: str) -> str:
        return self.columns.get(entity, {}).get(field, field)

    def select_list(self, entity: str, fields: list[str]) -> str:
        return ",".join(self.column(entity, f) for f in fields)

    def to_row(self, entity: str, data: dict[str, Any]) -> dict[str, Any]:
        """Canonical field names -> physical column names."""
        mapping = self.columns.get(entity, {})
        return {mapping.get(key, key): value for key, value in data.items()}

    def from_row(self, entity: str, row: dict[str, Any]) -> dict[str, Any]:
        """Physical row -> canonical names. Unmapped columns pass through."""
        result = dict(row)
        for field, column in self.columns.get(entity, {}).items():
            if field != column:
                result[field] = row.get(column)
        return result


def _merge(base: dict[str, Any], overrides: dict[str, Any]) -> dict[str, Any]:
    merged = deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = deepcopy(value)
    return merged


def build_profile(
    flavor: AnalyticsFlavor, overrides: dict[str, Any] | None = None
) -> SchemaProfile:
    """Base names, then the flavor's defaults, then the project's overrides."""
    layers: dict[str, Any] = {"tables": BASE_TABLES, "columns": BASE_COLUMNS}
    layers = _merge(layers, FLAVOR_DEFAULTS.get(flavor, {}))
    if overrides:
        layers = _merge(layers, {k: v for k, v in overrides.items() if k in ("tables", "columns")})
    return SchemaProfile(flavor=flavor, **layers)
