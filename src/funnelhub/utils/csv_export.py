"""CSV rendering for admin exports."""

import json
from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime
from typing import Any

from pydantic import BaseModel

BLOG_COLUMNS = ["id", "title", "slug", "author", "status", "category_id", "created_at"]
CATEGORY_COLUMNS = ["id", "name", "slug", "code_range"]
RELATED_SEARCH_COLUMNS = ["id", "search_text", "blog_id", "display_order", "is_active"]
WEB_RESULT_COLUMNS = ["id", "title", "url", "description", "is_sponsored", "is_active", "position"]
EMAIL_CAPTURE_COLUMNS = ["id", "email", "page_key", "source", "country", "captured_at"]
PRELANDING_COLUMNS = ["id", "page_key", "headline", "description", "cta_text", "background_color"]
SESSION_COLUMNS = [
    "session_id",
    "site_name",
    "device",
    "ip_address",
    "country",
    "time_spent",
    "timestamp",
    "page_views",
    "unique_pages",
    "total_clicks",
    "unique_clicks",
]

_NEEDS_QUOTING = (",", '"', "\n")


def format_cell(value: Any) -> str:
    """One cell: None empty, lists '; '-joined, mappings as JSON, quoted when needed."""
    if value is None:
        text = ""
    elif isinstance(value, bool):
        text = "true" if value else "false"
    elif isinstance(value, datetime | date):
        text = value.isoformat()
    elif isinstance(value, Mapping):
        text = json.dumps(value, default=str)
    elif isinstance(value, list | tuple):
        text = "; ".join("" if v is None else str(v) for v in value)
    else:
        text = str(value)

    if any(ch in text for ch in _NEEDS_QUOTING):
        return '"' + text.replace('"', '""') + '"'
    return text


def to_csv(rows: Iterable[Mapping[str, Any] | BaseModel], columns: Sequence[str]) -> str:
    """Header line then one line per row, joined with '\\n'."""
    lines = [",".join(format_cell(c) for c in columns)]
    for row in rows:
        data = row.model_dump() if isinstance(row, BaseModel) else row
        lines.append(",".join(format_cell(data.get(column)) for column in columns))
    return "\n".join(lines)


def export_filename(entity: str, today: date | None = None) -> str:
    return f"{entity}-{(today or date.today()).isoformat()}.csv"
