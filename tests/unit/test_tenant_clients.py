"""Tests for pooled tenant PostgREST clients."""

import httpx
import pytest

from src.funnelhub.models import AnalyticsFlavor
from src.funnelhub.tenancy.clients import TenantClientRegistry
from tests.factories import TenantProjectFactory
from tests.helpers import FakePostgrest

pytestmark = pytest.mark.unit


@pytest.fixture
def backend() -> FakePostgrest:
    return FakePostgrest({"blogs": [{"id": "1", "title": "Hello", "slug": "hello"}]})


@pytest.fixture
def registry(backend) -> TenantClientRegistry:
    return TenantClientRegistry(transport=httpx.MockTransport(backend))


class TestConnect:
    async def test_connection_carries_profile(self, registry):
        project = TenantProjectFactory.with_flavor(
            AnalyticsFlavor.LINK_TRACKING,
            slug="topic-mingle",
            name="Topic Mingle",
            schema_overrides={"tables": {"link_clicks": "click_tracking"}},
        )

        conn = await registry.connect(project)

        assert (conn.slug, conn.name) == ("topic-mingle", "Topic Mingle")
        assert conn.profile.flavor == AnalyticsFlavor.LINK_TRACKING
        assert conn.profile.table("link_clicks") == "click_tracking"

    async def test_client_reused(self, registry):
        project = TenantProjectFactory.build()

        first = await registry.connect(project)
        second = await registry.connect(project)

        assert first.client is second.client

    async def test_changed_key_replaces_client(self, registry):
        project = TenantProjectFactory.build()
        first = await registry.connect(project)

        project.anon_key = "rotated"
        second = await registry.connect(project)

        assert first.client is not second.client
        assert second.client._http.headers["apikey"] == "rotated"

    async def test_requests_reach_tenant(self, registry, backend):
        project = TenantProjectFactory.build(rest_url="https://tenant-a.supabase.co")
        conn = await registry.connect(project)

        result = await conn.client.table("blogs").select("*").execute()

        assert result.data[0]["title"] == "Hello"
        assert backend.requests[0].url.host == "tenant-a.supabase.co"


class TestLifecycle:
    async def test_evict(self, registry):
        project = TenantProjectFactory.build()
        first = await registry.connect(project)

        await registry.evict(project.slug)
        second = await registry.connect(project)

        assert first.client is not second.client

    async def test_evict_unknown_slug(self, registry):
        await registry.evict("never-connected")

    async def test_close_all(self, registry):
        projects = TenantProjectFactory.batch(2)
        conns = [await registry.connect(p) for p in projects]

        await registry.close_all()

        assert all(c.client._http.is_closed for c in conns)
