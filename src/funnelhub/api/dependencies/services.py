"""Service factory dependencies."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends

from src.funnelhub.api.dependencies.db import DBSession
from src.funnelhub.api.dependencies.repositories import (
    AuditLogRepo,
    BlogRepo,
    CategoryRepo,
    EmailCaptureRepo,
    PrelandingRepo,
    RelatedSearchRepo,
    TenantProjectRepo,
    WebResultRepo,
)
from src.funnelhub.api.dependencies.tenant import ActiveTenantConn, TenantProjectDep
from src.funnelhub.core.db import get_session
from src.funnelhub.integrations.ai_gateway import get_ai_gateway
from src.funnelhub.integrations.geoip import geoip
from src.funnelhub.repositories import AuditLogRepository
from src.funnelhub.repositories.remote import (
    EmailCaptureRepository,
    PrelandingRepository,
    RelatedSearchRepository,
    WebResultRepository,
)
from src.funnelhub.services.analytics import UnifiedAnalyticsService
from src.funnelhub.services.audit_service import AuditService
from src.funnelhub.services.blog_service import BlogService
from src.funnelhub.services.content_service import (
    CategoryService,
    EmailCaptureService,
    PrelandingService,
    RelatedSearchService,
    WebResultService,
)
from src.funnelhub.services.funnel_service import FunnelService
from src.funnelhub.services.generation_service import GenerationService
from src.funnelhub.services.tenant_service import TenantProjectService
from src.funnelhub.tenancy.clients import tenant_clients


async def get_registry_audit_service() -> AsyncGenerator[AuditService]:
    """Audit service for registry changes.

    Uses a dedicated session that commits independently from business
    transactions, so audit rows survive a rolled-back request.
    """
    async with get_session() as session:
        yield AuditService(AuditLogRepository(session), session)


async def get_tenant_audit_service(project: TenantProjectDep) -> AsyncGenerator[AuditService]:
    """Audit service scoped to the tenant project in the path."""
    async with get_session() as session:
        yield AuditService(AuditLogRepository(session), session, project.id)


RegistryAuditDep = Annotated[AuditService, Depends(get_registry_audit_service)]
TenantAuditDep = Annotated[AuditService, Depends(get_tenant_audit_service)]


def get_tenant_project_service(
    repo: TenantProjectRepo,
    session: DBSession,
    audit: RegistryAuditDep,
) -> TenantProjectService:
    return TenantProjectService(repo, session, tenant_clients, audit)


def get_audit_log_service(repo: AuditLogRepo, session: DBSession) -> AuditService:
    """Read side of the audit log, across all projects."""
    return AuditService(repo, session)


def get_category_service(repo: CategoryRepo, audit: TenantAuditDep) -> CategoryService:
    return CategoryService(repo, audit)


def get_blog_service(repo: BlogRepo, audit: TenantAuditDep) -> BlogService:
    return BlogService(repo, audit)


def get_related_search_service(
    repo: RelatedSearchRepo, audit: TenantAuditDep
) -> RelatedSearchService:
    return RelatedSearchService(repo, audit)


def get_web_result_service(repo: WebResultRepo, audit: TenantAuditDep) -> WebResultService:
    return WebResultService(repo, audit)


def get_prelanding_service(repo: PrelandingRepo, audit: TenantAuditDep) -> PrelandingService:
    return PrelandingService(repo, audit)


def get_email_capture_service(
    repo: EmailCaptureRepo, audit: TenantAuditDep
) -> EmailCaptureService:
    return EmailCaptureService(repo, audit)


def get_funnel_service(conn: ActiveTenantConn) -> FunnelService:
    return FunnelService(
        RelatedSearchRepository(conn),
        WebResultRepository(conn),
        PrelandingRepository(conn),
        EmailCaptureRepository(conn),
        geoip,
    )


def get_generation_service() -> GenerationService:
    return GenerationService(get_ai_gateway())


async def get_analytics_service(repo: TenantProjectRepo) -> UnifiedAnalyticsService:
    projects = await repo.list_all(active_only=True)
    return UnifiedAnalyticsService(projects, tenant_clients)


TenantProjectServiceDep = Annotated[TenantProjectService, Depends(get_tenant_project_service)]
AuditLogServiceDep = Annotated[AuditService, Depends(get_audit_log_service)]
CategoryServiceDep = Annotated[CategoryService, Depends(get_category_service)]
BlogServiceDep = Annotated[BlogService, Depends(get_blog_service)]
RelatedSearchServiceDep = Annotated[RelatedSearchService, Depends(get_related_search_service)]
WebResultServiceDep = Annotated[WebResultService, Depends(get_web_result_service)]
PrelandingServiceDep = Annotated[PrelandingService, Depends(get_prelanding_service)]
EmailCaptureServiceDep = Annotated[EmailCaptureService, Depends(get_email_capture_service)]
FunnelServiceDep = Annotated[FunnelService, Depends(get_funnel_service)]
GenerationServiceDep = Annotated[GenerationService, Depends(get_generation_service)]
AnalyticsServiceDep = Annotated[UnifiedAnalyticsService, Depends(get_analytics_service)]
