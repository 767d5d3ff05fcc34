"""Repository for the tenant project registry."""

from sqlmodel import select

from src.funnelhub.models import TenantProject
from src.funnelhub.repositories.base import BaseRepository


class TenantProjectRepository(BaseRepository[TenantProject]):
    model = TenantProject

    async def get_by_slug(self, slug: str) -> TenantProject | None:
        result = await self.session.execute(
            select(TenantProject).where(TenantProject.slug == slug)
        )
        return result.scalar_one_or_none()

    async def exists_by_slug(self, slug: str) -> bool:
        return await self.get_by_slug(slug) is not None

    async def list_all(self, active_only: bool = False) -> list[TenantProject]:
        """List projects ordered by name."""
        query = select(TenantProject)
        if active_only:
            query = query.where(TenantProject.is_active == True)  # noqa: E712
        result = await self.session.execute(query.order_by(TenantProject.name))
        return list(result.scalars().all())
