"""Tenant resolution from the {slug} path segment."""

from typing import Annotated

from fastapi import Depends, HTTPException, Path, status

from src.funnelhub.api.dependencies.db import DBSession
from src.funnelhub.core.logging import bind_tenant_context
from src.funnelhub.models import TenantProject
from src.funnelhub.repositories import TenantProjectRepository
from src.funnelhub.tenancy.clients import TenantConnection, tenant_clients


async def get_tenant_project(
    session: DBSession,
    slug: Annotated[str, Path(description="Tenant project slug")],
) -> TenantProject:
    """Registered project for the slug (active or not), or 404."""
    project = await TenantProjectRepository(session).get_by_slug(slug)
    if project is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant project '{slug}' not found",
        )
    bind_tenant_context(project.slug)
    return project


TenantProjectDep = Annotated[TenantProject, Depends(get_tenant_project)]


async def get_active_tenant_project(project: TenantProjectDep) -> TenantProject:
    """Public funnel pages only serve active projects; inactive ones look missing."""
    if not project.is_active:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Tenant project '{project.slug}' not found",
        )
    return project


ActiveTenantProject = Annotated[TenantProject, Depends(get_active_tenant_project)]


async def get_tenant_connection(project: TenantProjectDep) -> TenantConnection:
    return await tenant_clients.connect(project)


async def get_active_tenant_connection(project: ActiveTenantProject) -> TenantConnection:
    return await tenant_clients.connect(project)


TenantConn = Annotated[TenantConnection, Depends(get_tenant_connection)]
ActiveTenantConn = Annotated[TenantConnection, Depends(get_active_tenant_connection)]
