"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.funnelhub.api.dependencies.db import DBSession
from src.funnelhub.api.dependencies.tenant import TenantConn
from src.funnelhub.repositories import AuditLogRepository, TenantProjectRepository
from src.funnelhub.repositories.remote import (
    BlogRepository,
    CategoryRepository,
    EmailCaptureRepository,
    PrelandingRepository,
    RelatedSearchRepository,
    WebResultRepository,
)


def get_tenant_project_repository(session: DBSession) -> TenantProjectRepository:
    return TenantProjectRepository(session)


def get_audit_log_repository(session: DBSession) -> AuditLogRepository:
    return AuditLogRepository(session)


def get_category_repository(conn: TenantConn) -> CategoryRepository:
    return CategoryRepository(conn)


def get_blog_repository(conn: TenantConn) -> BlogRepository:
    return BlogRepository(conn)


def get_related_search_repository(conn: TenantConn) -> RelatedSearchRepository:
    return RelatedSearchRepository(conn)


def get_web_result_repository(conn: TenantConn) -> WebResultRepository:
    return WebResultRepository(conn)


def get_prelanding_repository(conn: TenantConn) -> PrelandingRepository:
    return PrelandingRepository(conn)


def get_email_capture_repository(conn: TenantConn) -> EmailCaptureRepository:
    return EmailCaptureRepository(conn)


TenantProjectRepo = Annotated[TenantProjectRepository, Depends(get_tenant_project_repository)]
AuditLogRepo = Annotated[AuditLogRepository, Depends(get_audit_log_repository)]
CategoryRepo = Annotated[CategoryRepository, Depends(get_category_repository)]
BlogRepo = Annotated[BlogRepository, Depends(get_blog_repository)]
RelatedSearchRepo = Annotated[RelatedSearchRepository, Depends(get_related_search_repository)]
WebResultRepo = Annotated[WebResultRepository, Depends(get_web_result_repository)]
PrelandingRepo = Annotated[PrelandingRepository, Depends(get_prelanding_repository)]
EmailCaptureRepo = Annotated[EmailCaptureRepository, Depends(get_email_capture_repository)]
