"""Tenant project registry endpoints."""

from fastapi import APIRouter, HTTPException, Query, status

from src.funnelhub.api.dependencies import TenantProjectDep, TenantProjectServiceDep
from src.funnelhub.schemas.tenant_project import (
    TenantProjectCreate,
    TenantProjectRead,
    TenantProjectUpdate,
)

router = APIRouter(prefix="/tenants", tags=["tenants"])


@router.get("", response_model=list[TenantProjectRead])
async def list_tenant_projects(
    service: TenantProjectServiceDep,
    active_only: bool = Query(default=False, description="Only projects included in analytics"),
) -> list[TenantProjectRead]:
    projects = await service.list_projects(active_only=active_only)
    return [TenantProjectRead.from_model(p) for p in projects]


@router.post(
    "",
    response_model=TenantProjectRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        201: {
            "description": "Tenant project registered",
            "content": {
                "application/json": {
                    "example": {
                        "id": "01926f9e-7a3b-7c1d-9e2f-3a4b5c6d7e8f",
                        "name": "Topic Mingle",
                        "slug": "topic-mingle",
                        "rest_url": "https://abcdefgh.supabase.co",
                        "anon_key_hint": "...x9Qk",
                        "analytics_flavor": "event_log",
                        "schema_overrides": None,
                        "color": "#6366f1",
                        "is_active": True,
                        "created_at": "2025-01-01T00:00:00",
                        "updated_at": "2025-01-01T00:00:00",
                    }
                }
            },
        },
        409: {"description": "Tenant slug already exists"},
    },
)
async def register_tenant_project(
    request: TenantProjectCreate,
    service: TenantProjectServiceDep,
) -> TenantProjectRead:
    """Register an existing Supabase project with the hub.

    The anon key is stored and used for every PostgREST call to the project;
    responses only ever show its last four characters.
    """
    try:
        project = await service.register(request)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
    return TenantProjectRead.from_model(project)


@router.get(
    "/{slug}",
    response_model=TenantProjectRead,
    responses={404: {"description": "Tenant project not found"}},
)
async def get_tenant_project(project: TenantProjectDep) -> TenantProjectRead:
    return TenantProjectRead.from_model(project)


@router.patch(
    "/{slug}",
    response_model=TenantProjectRead,
    responses={404: {"description": "Tenant project not found"}},
)
async def update_tenant_project(
    request: TenantProjectUpdate,
    project: TenantProjectDep,
    service: TenantProjectServiceDep,
) -> TenantProjectRead:
    """Partial update. Changing the URL or key replaces the pooled client."""
    return TenantProjectRead.from_model(await service.update(project, request))


@router.delete(
    "/{slug}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"description": "Tenant project not found"}},
)
async def delete_tenant_project(project: TenantProjectDep, service: TenantProjectServiceDep) -> None:
    await service.delete(project)
