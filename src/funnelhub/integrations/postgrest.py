"""Async client for Supabase's PostgREST interface.

A small fluent builder mirroring the Supabase JS client:

    result = await client.table("blogs").select("*").eq("status", "published").execute()

Each call to `table()` returns a fresh builder; the underlying httpx client
(and its connection pool) is shared per tenant project.
"""

from dataclasses import dataclass
from typing import Any, Self

import httpx

from src.funnelhub.core.logging import get_logger

logger = get_logger(__name__)

# Characters that force a value inside in.(...) / cs.{...} to be double-quoted
_RESERVED = set(',.:()"{} ')


class PostgrestError(Exception):
    """Non-2xx response, or a transport failure when status_code is None."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
        details: Any = None,
        hint: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        self.hint = hint


@dataclass
class QueryResult:
    data: Any
    count: int | None = None


def format_value(value: Any) -> str:
    """Render a filter operand the way PostgREST parses it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quote_list_item(value: Any) -> str:
    text = format_value(value)
    if any(ch in _RESERVED for ch in text):
        escaped = text.replace("\\", "\\\\").replace('"', '\\"')
        return f'"{escaped}"'
    return text


def parse_content_range(header: str | None) -> int | None:
    """Total row count from a Content-Range header such as '0-9/42' or '*/0'."""
    if not header or "/" not in header:
        return None
    total = header.rsplit("/", 1)[1]
    return int(total) if total.isdigit() else None


class QueryBuilder:
    """One request against one table. Not reusable after execute()."""

    def __init__(self, http: httpx.AsyncClient, table: str):
        self._http = http
        self._table = table
        self._method = "GET"
        self._params: list[tuple[str, str]] = []
        self._order: list[str] = []
        self._prefer: list[str] = []
        self._body: Any = None
        self._single: str | None = None  # "maybe" or "one"

    @property
    def table_name(self) -> str:
        return self._table

    # Verbs

    def select(self, columns: str = "*", count: str | None = None) -> Self:
        """Read rows. count="exact" makes execute() report the total row count."""
        self._params.append(("select", columns))
        if count:
            self._prefer.append(f"count={count}")
        return self

    def insert(self, rows: dict[str, Any] | list[dict[str, Any]]) -> Self:
        self._method = "POST"
        self._body = rows
        self._prefer.append("return=representation")
        return self

    def update(self, values: dict[str, Any]) -> Self:
        self._method = "PATCH"
        self._body = values
        self._prefer.append("return=representation")
        return self

    def delete(self) -> Self:
        self._method = "DELETE"
        self._prefer.append("return=representation")
        return self

    # Filters

    def filter(self, column: str, operator: str, value: Any) -> Self:
        self._params.append((column, f"{operator}.{format_value(value)}"))
        return self

    def eq(self, column: str, value: Any) -> Self:
        return self.filter(column, "eq", value)

    def neq(self, column: str, value: Any) -> Self:
        return self.filter(column, "neq", value)

    def gt(self, column: str, value: Any) -> Self:
        return self.filter(column, "gt", value)

    def gte(self, column: str, value: Any) -> Self:
        return self.filter(column, "gte", value)

    def lt(self, column: str, value: Any) -> Self:
        return self.filter(column, "lt", value)

    def lte(self, column: str, value: Any) -> Self:
        return self.filter(column, "lte", value)

    def ilike(self, column: str, pattern: str) -> Self:
        return self.filter(column, "ilike", pattern)

    def is_(self, column: str, value: bool | None) -> Self:
        return self.filter(column, "is", value)

    def in_(self, column: str, values: list[Any]) -> Self:
        items = ",".join(_quote_list_item(v) for v in values)
        self._params.append((column, f"in.({items})"))
        return self

    def contains(self, column: str, values: list[Any]) -> Self:
        """Array column contains every value (cs operator)."""
        items = ",".join(_quote_list_item(v) for v in values)
        self._params.append((column, f"cs.{{{items}}}"))
        return self

    # Modifiers

    def order(self, column: str, desc: bool = False, nulls_first: bool | None = None) -> Self:
        term = f"{column}.{'desc' if desc else 'asc'}"
        if nulls_first is not None:
            term += ".nullsfirst" if nulls_first else ".nullslast"
        self._order.append(term)
        return self

    def limit(self, count: int) -> Self:
        self._params.append(("limit", str(count)))
        return self

    def range(self, start: int, end: int) -> Self:
        """Inclusive row window, like Supabase's range()."""
        self._params.append(("offset", str(start)))
        self._params.append(("limit", str(end - start + 1)))
        return self

    def maybe_single(self) -> Self:
        """Return one row or None instead of a list."""
        self._single = "maybe"
        return self

    def single(self) -> Self:
        """Return exactly one row; anything else raises PostgrestError."""
        self._single = "one"
        return self

    # Execution

    def build_params(self) -> list[tuple[str, str]]:
        params = list(self._params)
        if self._order:
            params.append(("order", ",".join(self._order)))
        return params

    def build_headers(self) -> dict[str, str]:
        return {"Prefer": ",".join(self._prefer)} if self._prefer else {}

    async def execute(self) -> QueryResult:
        try:
            response = await self._http.request(
                self._method,
                f"/{self._table}",
                params=self.build_params(),
                headers=self.build_headers(),
                json=self._body,
            )
        except httpx.HTTPError as e:
            raise PostgrestError(f"Request to '{self._table}' failed: {e}") from e

        if response.is_error:
            raise self._error_from(response)

        data: Any = response.json() if response.content else []
        count = parse_content_range(response.headers.get("content-range"))

        if self._single is not None:
            rows = data if isinstance(data, list) else [data]
            if len(rows) > 1 or (self._single == "one" and not rows):
                raise PostgrestError(
                    f"Expected a single row from '{self._table}', got {len(rows)}",
                    status_code=406,
                    code="PGRST116",
                )
            data = rows[0] if rows else None

        return QueryResult(data=data, count=count)

    def _error_from(self, response: httpx.Response) -> PostgrestError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {}
        message = body.get("message") or response.text or response.reason_phrase
        logger.debug(
            "PostgREST request rejected",
            table=self._table,
            status=response.status_code,
            code=body.get("code"),
        )
        return PostgrestError(
            message,
            status_code=response.status_code,
            code=body.get("code"),
            details=body.get("details"),
            hint=body.get("hint"),
        )


class PostgrestClient:
    """Connection to one Supabase project's REST endpoint."""

    def __init__(
        self,
        rest_url: str,
        api_key: str,
        timeout: float = 15.0,
        max_connections: int = 10,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.rest_url = rest_url.rstrip("/")
        self._http = httpx.AsyncClient(
            base_url=f"{self.rest_url}/rest/v1",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout,
            limits=httpx.Limits(max_connections=max_connections),
            transport=transport,
        )

    def table(self, name: str) -> QueryBuilder:
        return QueryBuilder(self._http, name)

    async def aclose(self) -> None:
        await self._http.aclose()
