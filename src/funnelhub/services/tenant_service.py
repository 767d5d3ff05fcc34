"""Tenant project registry service."""

from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from src.funnelhub.core import cache
from src.funnelhub.core.logging import get_logger
from src.funnelhub.models import AuditAction, TenantProject
from src.funnelhub.models.base import utc_now
from src.funnelhub.repositories import TenantProjectRepository
from src.funnelhub.schemas.tenant_project import TenantProjectCreate, TenantProjectUpdate
from src.funnelhub.services.audit_service import AuditService
from src.funnelhub.tenancy.clients import TenantClientRegistry

logger = get_logger(__name__)

ENTITY_TYPE = "tenant_project"
_SECRET_FIELDS = {"anon_key"}
_NULLABLE_FIELDS = {"schema_overrides", "color"}


class TenantProjectService:
    def __init__(
        self,
        repo: TenantProjectRepository,
        session: AsyncSession,
        clients: TenantClientRegistry,
        audit: AuditService,
    ):
        self.repo = repo
        self.session = session
        self.clients = clients
        self.audit = audit

    async def list_projects(self, active_only: bool = False) -> list[TenantProject]:
        return await self.repo.list_all(active_only=active_only)

    async def get_by_slug(self, slug: str) -> TenantProject | None:
        return await self.repo.get_by_slug(slug)

    async def register(self, data: TenantProjectCreate) -> TenantProject:
        """Add a tenant project to the registry.

        Raises:
            ValueError: If the slug is already registered.
        """
        if await self.repo.exists_by_slug(data.slug):
            raise ValueError(f"Tenant project '{data.slug}' already exists")

        project = TenantProject(
            name=data.name,
            slug=data.slug,
            rest_url=data.rest_url,
            anon_key=data.anon_key,
            analytics_flavor=data.analytics_flavor.value,
            schema_overrides=data.schema_overrides,
            color=data.color,
            is_active=data.is_active,
        )
        try:
            self.repo.add(project)
            await self.session.commit()
            await self.session.refresh(project)
        except IntegrityError as e:
            await self.session.rollback()
            raise ValueError(f"Tenant project '{data.slug}' already exists") from e

        logger.info("Tenant project registered", tenant=project.slug, flavor=project.analytics_flavor)
        await self.audit.log_success(
            AuditAction.TENANT_REGISTER,
            ENTITY_TYPE,
            entity_id=project.id,
            changes={"slug": project.slug, "analytics_flavor": project.analytics_flavor},
        )
        return project

    async def update(self, project: TenantProject, data: TenantProjectUpdate) -> TenantProject:
        changes: dict[str, Any] = {}
        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field not in _NULLABLE_FIELDS:
                continue
            if hasattr(value, "value"):
                value = value.value
            old = getattr(project, field)
            if old != value:
                changes[field] = (
                    {"changed": True}
                    if field in _SECRET_FIELDS
                    else {"old": old, "new": value}
                )
                setattr(project, field, value)

        if not changes:
            return project

        project.updated_at = utc_now()
        self.repo.add(project)
        await self.session.commit()
        await self.session.refresh(project)

        await self._forget(project.slug)
        logger.info("Tenant project updated", tenant=project.slug, fields=sorted(changes))
        await self.audit.log_success(
            AuditAction.TENANT_UPDATE, ENTITY_TYPE, entity_id=project.id, changes=changes
        )
        return project

    async def delete(self, project: TenantProject) -> None:
        project_id, slug = project.id, project.slug
        await self.repo.delete(project)
        await self.session.commit()

        await self._forget(slug)
        logger.info("Tenant project deleted", tenant=slug)
        await self.audit.log_success(
            AuditAction.TENANT_DELETE, ENTITY_TYPE, entity_id=project_id, changes={"slug": slug}
        )

    async def _forget(self, slug: str) -> None:
        """Drop the pooled client and cached analytics for a changed project."""
        await self.clients.evict(slug)
        await cache.delete_prefix(cache.cache_key(cache.PREFIX_ANALYTICS, slug))
