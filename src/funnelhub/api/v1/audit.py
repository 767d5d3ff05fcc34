"""Audit log endpoints."""

from typing import Annotated

from fastapi import APIRouter, Query

from src.funnelhub.api.dependencies import AuditLogServiceDep
from src.funnelhub.api.dependencies.services import TenantAuditDep
from src.funnelhub.schemas.audit import AuditLogRead
from src.funnelhub.schemas.pagination import PaginatedResponse

router = APIRouter(tags=["audit"])

CursorQuery = Annotated[str | None, Query(description="Pagination cursor")]
LimitQuery = Annotated[int, Query(ge=1, le=100, description="Items per page")]
ActionQuery = Annotated[str | None, Query(description="Filter by action, e.g. content.create")]
EntityTypeQuery = Annotated[str | None, Query(description="Filter by entity type, e.g. blog")]


@router.get("/audit-logs", response_model=PaginatedResponse[AuditLogRead])
async def list_audit_logs(
    audit_service: AuditLogServiceDep,
    cursor: CursorQuery = None,
    limit: LimitQuery = 50,
    action: ActionQuery = None,
    entity_type: EntityTypeQuery = None,
) -> PaginatedResponse[AuditLogRead]:
    """Every recorded registry and content change, newest first."""
    logs, next_cursor, has_more = await audit_service.list_logs(
        cursor=cursor, limit=limit, action=action, entity_type=entity_type
    )
    return PaginatedResponse[AuditLogRead](
        items=[AuditLogRead.model_validate(log) for log in logs],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.get("/tenants/{slug}/audit-logs", response_model=PaginatedResponse[AuditLogRead])
async def list_tenant_audit_logs(
    audit_service: TenantAuditDep,
    cursor: CursorQuery = None,
    limit: LimitQuery = 50,
    action: ActionQuery = None,
    entity_type: EntityTypeQuery = None,
) -> PaginatedResponse[AuditLogRead]:
    """Changes recorded against one tenant project."""
    logs, next_cursor, has_more = await audit_service.list_logs(
        cursor=cursor, limit=limit, action=action, entity_type=entity_type
    )
    return PaginatedResponse[AuditLogRead](
        items=[AuditLogRead.model_validate(log) for log in logs],
        next_cursor=next_cursor,
        has_more=has_more,
    )
