"""FastAPI dependency injection definitions."""

from src.funnelhub.api.dependencies.auth import AdminKey, require_admin_key
from src.funnelhub.api.dependencies.db import DBSession, get_db_session
from src.funnelhub.api.dependencies.repositories import (
    AuditLogRepo,
    TenantProjectRepo,
    get_audit_log_repository,
    get_tenant_project_repository,
)
from src.funnelhub.api.dependencies.services import (
    AnalyticsServiceDep,
    AuditLogServiceDep,
    BlogServiceDep,
    CategoryServiceDep,
    EmailCaptureServiceDep,
    FunnelServiceDep,
    GenerationServiceDep,
    PrelandingServiceDep,
    RelatedSearchServiceDep,
    TenantProjectServiceDep,
    WebResultServiceDep,
    get_analytics_service,
    get_generation_service,
    get_tenant_project_service,
)
from src.funnelhub.api.dependencies.tenant import (
    ActiveTenantConn,
    ActiveTenantProject,
    TenantConn,
    TenantProjectDep,
    get_active_tenant_project,
    get_tenant_connection,
    get_tenant_project,
)

__all__ = [
    # Auth
    "AdminKey",
    "require_admin_key",
    # Database
    "DBSession",
    "get_db_session",
    # Tenant
    "ActiveTenantConn",
    "ActiveTenantProject",
    "TenantConn",
    "TenantProjectDep",
    "get_active_tenant_project",
    "get_tenant_connection",
    "get_tenant_project",
    # Repositories
    "AuditLogRepo",
    "TenantProjectRepo",
    "get_audit_log_repository",
    "get_tenant_project_repository",
    # Services
    "AnalyticsServiceDep",
    "AuditLogServiceDep",
    "BlogServiceDep",
    "CategoryServiceDep",
    "EmailCaptureServiceDep",
    "FunnelServiceDep",
    "GenerationServiceDep",
    "PrelandingServiceDep",
    "RelatedSearchServiceDep",
    "TenantProjectServiceDep",
    "WebResultServiceDep",
    "get_analytics_service",
    "get_generation_service",
    "get_tenant_project_service",
]
