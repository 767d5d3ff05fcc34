"""Tests for the PostgREST query builder against httpx.MockTransport."""

import json

import httpx
import pytest

from src.funnelhub.integrations.postgrest import (
    PostgrestClient,
    PostgrestError,
    format_value,
    parse_content_range,
)

pytestmark = pytest.mark.unit


class Recorder:
    def __init__(self, response: httpx.Response | None = None):
        self.response = response or httpx.Response(200, json=[])
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _client(recorder: Recorder) -> PostgrestClient:
    return PostgrestClient(
        "https://abc.supabase.co/", "anon-123", transport=httpx.MockTransport(recorder)
    )


class TestHelpers:
    @pytest.mark.parametrize(
        ("value", "expected"), [(None, "null"), (True, "true"), (False, "false"), (3, "3")]
    )
    def test_format_value(self, value, expected):
        assert format_value(value) == expected

    @pytest.mark.parametrize(
        ("header", "expected"),
        [("0-9/42", 42), ("*/0", 0), ("0-9/*", None), (None, None), ("garbage", None)],
    )
    def test_parse_content_range(self, header, expected):
        assert parse_content_range(header) == expected


class TestRequests:
    async def test_auth_headers_and_base_path(self):
        recorder = Recorder()
        await _client(recorder).table("blogs").select().execute()

        request = recorder.last
        assert request.url.path == "/rest/v1/blogs"
        assert request.headers["apikey"] == "anon-123"
        assert request.headers["authorization"] == "Bearer anon-123"

    async def test_filters_and_modifiers(self):
        recorder = Recorder()
        await (
            _client(recorder)
            .table("related_searches")
            .select("id,search_text")
            .eq("blog_id", "b1")
            .is_("category_id", None)
            .gte("created_at", "2025-01-01")
            .ilike("search_text", "%shoes%")
            .in_("id", ["a", "b,c"])
            .contains("allowed_countries", ["US"])
            .order("display_order")
            .order("created_at", desc=True, nulls_first=False)
            .range(10, 19)
            .execute()
        )

        params = recorder.last.url.params
        assert params["select"] == "id,search_text"
        assert params["blog_id"] == "eq.b1"
        assert params["category_id"] == "is.null"
        assert params["created_at"] == "gte.2025-01-01"
        assert params["search_text"] == "ilike.%shoes%"
        assert params["id"] == 'in.(a,"b,c")'
        assert params["allowed_countries"] == "cs.{US}"
        assert params["order"] == "display_order.asc,created_at.desc.nullslast"
        assert params["offset"] == "10"
        assert params["limit"] == "10"

    async def test_count_exact_reads_content_range(self):
        recorder = Recorder(
            httpx.Response(200, json=[{"id": 1}], headers={"Content-Range": "0-0/17"})
        )
        result = await _client(recorder).table("blogs").select("*", count="exact").execute()

        assert recorder.last.headers["prefer"] == "count=exact"
        assert result.data == [{"id": 1}]
        assert result.count == 17

    @pytest.mark.parametrize(
        ("verb", "method"), [("insert", "POST"), ("update", "PATCH")]
    )
    async def test_writes_request_representation(self, verb, method):
        recorder = Recorder(httpx.Response(201, json=[{"id": 1, "name": "x"}]))
        builder = getattr(_client(recorder).table("categories"), verb)({"name": "x"})
        result = await builder.execute()

        assert recorder.last.method == method
        assert recorder.last.headers["prefer"] == "return=representation"
        assert json.loads(recorder.last.content) == {"name": "x"}
        assert result.data == [{"id": 1, "name": "x"}]

    async def test_delete(self):
        recorder = Recorder(httpx.Response(200, json=[{"id": 4}]))
        result = await _client(recorder).table("blogs").delete().eq("id", 4).execute()

        assert recorder.last.method == "DELETE"
        assert recorder.last.url.params["id"] == "eq.4"
        assert result.data == [{"id": 4}]


class TestSingleRow:
    async def test_maybe_single_returns_none_for_no_rows(self):
        result = await _client(Recorder()).table("blogs").select().maybe_single().execute()
        assert result.data is None

    async def test_maybe_single_unwraps_one_row(self):
        recorder = Recorder(httpx.Response(200, json=[{"id": 1}]))
        result = await _client(recorder).table("blogs").select().maybe_single().execute()
        assert result.data == {"id": 1}

    async def test_single_raises_for_no_rows(self):
        with pytest.raises(PostgrestError) as exc_info:
            await _client(Recorder()).table("blogs").select().single().execute()
        assert exc_info.value.status_code == 406
        assert exc_info.value.code == "PGRST116"

    async def test_maybe_single_raises_for_many_rows(self):
        recorder = Recorder(httpx.Response(200, json=[{"id": 1}, {"id": 2}]))
        with pytest.raises(PostgrestError):
            await _client(recorder).table("blogs").select().maybe_single().execute()


class TestErrors:
    async def test_error_body_is_parsed(self):
        recorder = Recorder(
            httpx.Response(
                400,
                json={
                    "message": 'column "nope" does not exist',
                    "code": "42703",
                    "details": None,
                    "hint": "Perhaps you meant ...",
                },
            )
        )
        with pytest.raises(PostgrestError) as exc_info:
            await _client(recorder).table("blogs").select("nope").execute()

        error = exc_info.value
        assert error.status_code == 400
        assert error.code == "42703"
        assert error.message == 'column "nope" does not exist'
        assert error.hint == "Perhaps you meant ..."

    async def test_non_json_error_uses_text(self):
        recorder = Recorder(httpx.Response(503, text="upstream down"))
        with pytest.raises(PostgrestError) as exc_info:
            await _client(recorder).table("blogs").select().execute()
        assert exc_info.value.message == "upstream down"

    async def test_transport_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("timed out", request=request)

        client = PostgrestClient("https://abc.supabase.co", "k", transport=httpx.MockTransport(handler))
        with pytest.raises(PostgrestError) as exc_info:
            await client.table("blogs").select().execute()
        assert exc_info.value.status_code is None
        assert "timed out" in exc_info.value.message
