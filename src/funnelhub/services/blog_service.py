"""Blog administration: slugs, default images, serial numbers and publishing."""

from datetime import UTC, datetime
from typing import Any

from src.funnelhub.core.validators import slugify
from src.funnelhub.models import BlogStatus, BulkAction
from src.funnelhub.repositories.remote import BlogRepository
from src.funnelhub.schemas.blog import BlogRead
from src.funnelhub.services.audit_service import AuditService
from src.funnelhub.services.content_service import ContentService
from src.funnelhub.utils import csv_export
from src.funnelhub.utils.images import default_image_for_title


def _now_iso() -> str:
    return datetime.now(UTC).isoformat()


class BlogService(ContentService[BlogRead]):
    entity_type = "blog"
    csv_columns = csv_export.BLOG_COLUMNS

    def __init__(self, repo: BlogRepository, audit: AuditService):
        super().__init__(repo, audit)
        self.blogs = repo

    def supported_bulk_actions(self) -> set[BulkAction]:
        return {BulkAction.PUBLISH, BulkAction.UNPUBLISH, BulkAction.DELETE}

    def bulk_values(self, action: BulkAction) -> dict[str, Any]:
        if action == BulkAction.PUBLISH:
            return {"status": BlogStatus.PUBLISHED.value, "published_at": _now_iso()}
        if action == BulkAction.UNPUBLISH:
            return {"status": BlogStatus.DRAFT.value}
        return super().bulk_values(action)

    async def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        title = data["title"]
        data["slug"] = slugify(data.get("slug") or title)
        if not data["slug"]:
            raise ValueError("Cannot derive a slug from this title")
        if await self.blogs.get_by_slug(data["slug"]) is not None:
            raise ValueError(f"A blog with slug '{data['slug']}' already exists")
        if not data.get("featured_image"):
            data["featured_image"] = default_image_for_title(title)
        if data.get("status") == BlogStatus.PUBLISHED.value:
            data["published_at"] = _now_iso()
        data["serial_number"] = await self.blogs.max_serial_number() + 1
        return data

    async def prepare_update(self, data: dict[str, Any]) -> dict[str, Any]:
        if data.get("slug"):
            data["slug"] = slugify(data["slug"])
        if data.get("status") == BlogStatus.PUBLISHED.value:
            data["published_at"] = _now_iso()
        return data

    async def get_by_slug(self, slug: str) -> BlogRead | None:
        return await self.blogs.get_by_slug(slug)
