"""Integration fixtures: the real app with its outer dependencies replaced.

The hub database session, the tenant registry lookup, tenant PostgREST
backends and the audit trail are overridden per test, so the full HTTP
stack (middlewares, routers, validation, error handlers) runs without any
external service.
"""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI, HTTPException, status
from httpx import ASGITransport, AsyncClient

from src.funnelhub.api.dependencies import db as db_deps
from src.funnelhub.api.dependencies import repositories as repo_deps
from src.funnelhub.api.dependencies import services as service_deps
from src.funnelhub.api.dependencies import tenant as tenant_deps
from src.funnelhub.api.dependencies.tenant import ActiveTenantProject, TenantProjectDep
from src.funnelhub.core import rate_limit
from src.funnelhub.core import redis as redis_core
from src.funnelhub.core.health import reset_health_cache
from src.funnelhub.main import create_app
from src.funnelhub.models import TenantProject
from src.funnelhub.repositories import TenantProjectRepository
from src.funnelhub.services.audit_service import AuditService
from src.funnelhub.tenancy.clients import TenantConnection
from tests.factories import TenantProjectFactory
from tests.helpers import FakePostgrest, make_connection


@pytest.fixture(autouse=True)
def _reset_state(mock_redis_unavailable) -> None:
    redis_core.reset_redis_state()
    rate_limit.reset_buckets()
    reset_health_cache()
    yield
    rate_limit.reset_buckets()
    reset_health_cache()


@pytest.fixture
def tenant_projects() -> dict[str, TenantProject]:
    """Registry contents: one active site, one paused."""
    return {
        "topic-mingle": TenantProjectFactory.build(
            slug="topic-mingle", name="Topic Mingle", rest_url="https://topic-mingle.supabase.co"
        ),
        "paused-site": TenantProjectFactory.inactive(
            slug="paused-site", name="Paused Site", rest_url="https://paused-site.supabase.co"
        ),
    }


@pytest.fixture
def backend() -> FakePostgrest:
    """Tenant content shared by the content admin and funnel tests."""
    return FakePostgrest(
        {
            "categories": [{"id": 1, "name": "Travel", "slug": "travel"}],
            "blogs": [
                {"id": "b1", "title": "Ten Tips", "slug": "ten-tips", "status": "published",
                 "category_id": 1, "serial_number": 1, "created_at": "2025-06-01T10:00:00+00:00"},
                {"id": "b2", "title": "Draft Post", "slug": "draft-post", "status": "draft",
                 "serial_number": 2, "created_at": "2025-06-02T10:00:00+00:00"},
            ],
            "related_searches": [
                {"id": "r1", "search_text": "cheap flights", "blog_id": "b1",
                 "display_order": 0, "is_active": True, "allowed_countries": ["WW"]},
                {"id": "r2", "search_text": "hotel deals", "blog_id": "b1",
                 "display_order": 1, "is_active": True, "pre_landing_page_key": "hotels-abc123"},
            ],
            "web_results": [
                {"id": "w1", "title": "Fly Now", "target_url": "https://fly.example.com",
                 "is_sponsored": True, "position": 0, "page_number": 1,
                 "related_search_id": "r1", "is_active": True},
            ],
            "pre_landing_pages": [
                {"id": "p1", "page_key": "hotels-abc123", "headline": "Hotels", "related_search_id": "r2",
                 "target_url": "https://hotels.example.com", "is_active": True},
            ],
            "email_captures": [],
        }
    )


@pytest.fixture
def audit() -> AsyncMock:
    return AsyncMock(spec=AuditService)


@pytest.fixture
def tenant_repo(tenant_projects) -> MagicMock:
    """Registry repository backed by the tenant_projects dict."""
    repo = MagicMock(spec=TenantProjectRepository)
    repo.exists_by_slug = AsyncMock(side_effect=lambda slug: slug in tenant_projects)
    repo.get_by_slug = AsyncMock(side_effect=tenant_projects.get)

    async def _list_all(active_only: bool = False):
        return [p for p in tenant_projects.values() if p.is_active or not active_only]

    repo.list_all = AsyncMock(side_effect=_list_all)
    repo.delete = AsyncMock()
    return repo


@pytest.fixture
def app(tenant_projects, tenant_repo, backend, audit) -> FastAPI:
    """App with the registry, tenant backends and audit trail replaced."""
    app = create_app()

    async def _db_session() -> AsyncGenerator[AsyncMock]:
        yield AsyncMock()

    async def _tenant_project(slug: str) -> TenantProject:
        project = tenant_projects.get(slug)
        if project is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Tenant project '{slug}' not found",
            )
        return project

    def _connect(project: TenantProject) -> TenantConnection:
        return make_connection(backend, flavor=project.flavor, slug=project.slug, name=project.name)

    async def _tenant_connection(project: TenantProjectDep) -> TenantConnection:
        return _connect(project)

    async def _active_tenant_connection(project: ActiveTenantProject) -> TenantConnection:
        return _connect(project)

    app.dependency_overrides[db_deps.get_db_session] = _db_session
    app.dependency_overrides[tenant_deps.get_tenant_project] = _tenant_project
    app.dependency_overrides[tenant_deps.get_tenant_connection] = _tenant_connection
    app.dependency_overrides[tenant_deps.get_active_tenant_connection] = _active_tenant_connection
    app.dependency_overrides[service_deps.get_tenant_audit_service] = lambda: audit
    app.dependency_overrides[service_deps.get_registry_audit_service] = lambda: audit
    app.dependency_overrides[repo_deps.get_tenant_project_repository] = lambda: tenant_repo
    return app


@pytest.fixture
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient]:
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


