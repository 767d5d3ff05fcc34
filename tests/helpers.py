"""Fakes for tenant PostgREST backends."""

import json
from collections.abc import Callable
from itertools import count
from typing import Any

import httpx

from src.funnelhub.integrations.postgrest import PostgrestClient, format_value
from src.funnelhub.models import AnalyticsFlavor
from src.funnelhub.tenancy.clients import TenantConnection
from src.funnelhub.tenancy.profile import build_profile

_CONTROL_PARAMS = {"select", "order", "limit", "offset"}


def _members(expr: str) -> set[str]:
    return {item.strip('"') for item in expr[len("in.(") : -1].split(",")}


def _matches(row: dict[str, Any], column: str, expr: str) -> bool:
    value = row.get(column)
    operator, _, operand = expr.partition(".")
    if operator == "eq":
        return format_value(value) == operand
    if operator == "is":
        return format_value(value) == operand
    if operator == "in":
        return format_value(value) in _members(expr)
    if operator == "gte":
        return value is not None and str(value) >= operand
    if operator == "lt":
        return value is not None and str(value) < operand
    raise AssertionError(f"FakePostgrest does not support '{expr}'")


class FakePostgrest:
    """In-memory stand-in for one tenant's /rest/v1 endpoint.

    Supports the subset of PostgREST the hub uses: eq/is/in/gte/lt filters,
    a single order term, offset/limit, count=exact and writes returning
    representation. Every request is recorded in `requests`.
    """

    def __init__(
        self,
        tables: dict[str, list[dict[str, Any]]] | None = None,
        errors: dict[str, tuple[int, dict[str, Any]]] | None = None,
    ):
        self.tables = {name: [dict(r) for r in rows] for name, rows in (tables or {}).items()}
        self.errors = errors or {}
        self.requests: list[httpx.Request] = []
        self._ids = count(1000)

    def requests_for(self, table: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.url.path.endswith(f"/{table}")]

    def _select(self, table: str, params: httpx.QueryParams) -> list[dict[str, Any]]:
        rows = self.tables.get(table, [])
        for column, expr in params.multi_items():
            if column not in _CONTROL_PARAMS:
                rows = [r for r in rows if _matches(r, column, expr)]
        return rows

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        table = request.url.path.rsplit("/", 1)[-1]
        if table in self.errors:
            status_code, body = self.errors[table]
            return httpx.Response(status_code, json=body)

        params = request.url.params
        matched = self._select(table, params)

        if request.method == "POST":
            body = json.loads(request.content)
            created = []
            for row in body if isinstance(body, list) else [body]:
                row = {"id": str(next(self._ids)), **row}
                self.tables.setdefault(table, []).append(row)
                created.append(row)
            return httpx.Response(201, json=created)

        if request.method == "PATCH":
            values = json.loads(request.content)
            for row in matched:
                row.update(values)
            return httpx.Response(200, json=matched)

        if request.method == "DELETE":
            ids = {id(r) for r in matched}
            self.tables[table] = [r for r in self.tables.get(table, []) if id(r) not in ids]
            return httpx.Response(200, json=matched)

        rows = list(matched)
        order = params.get("order")
        if order:
            column, direction = order.split(",")[0].split(".")[:2]
            present = [r for r in rows if r.get(column) is not None]
            missing = [r for r in rows if r.get(column) is None]
            present.sort(key=lambda r: r[column], reverse=direction == "desc")
            rows = present + missing

        offset = int(params.get("offset", 0))
        limit = params.get("limit")
        window = rows[offset : offset + int(limit)] if limit else rows[offset:]

        headers = {}
        if "count=exact" in request.headers.get("prefer", ""):
            span = f"{offset}-{offset + len(window) - 1}" if window else "*"
            headers["content-range"] = f"{span}/{len(rows)}"
        return httpx.Response(200, json=window, headers=headers)


def make_connection(
    handler: Callable[[httpx.Request], httpx.Response],
    flavor: AnalyticsFlavor = AnalyticsFlavor.SESSION_TABLES,
    overrides: dict[str, Any] | None = None,
    slug: str = "topic-mingle",
    name: str = "Topic Mingle",
) -> TenantConnection:
    client = PostgrestClient(
        "https://tenant.supabase.co", "anon-key", transport=httpx.MockTransport(handler)
    )
    return TenantConnection(
        slug=slug, name=name, client=client, profile=build_profile(flavor, overrides)
    )
