"""Admin CRUD over tenant content tables."""

import secrets
from typing import Any

from pydantic import BaseModel

from src.funnelhub.core.exceptions import TenantBackendError
from src.funnelhub.core.logging import get_logger
from src.funnelhub.core.validators import slugify
from src.funnelhub.models import AuditAction, BulkAction
from src.funnelhub.repositories.remote import (
    CategoryRepository,
    EmailCaptureRepository,
    PrelandingRepository,
    RelatedSearchRepository,
    RemoteRepository,
    WebResultRepository,
)
from src.funnelhub.schemas.bulk import BulkActionResult
from src.funnelhub.schemas.pagination import Page, page_bounds
from src.funnelhub.services.audit_service import AuditService
from src.funnelhub.utils import csv_export

logger = get_logger(__name__)

# Explicit nulls for these are ignored on update
NON_NULLABLE_FIELDS = frozenset(
    {
        "title", "name", "slug", "status", "search_text", "headline", "url", "page_key",
        "cta_text", "background_color", "target_url", "is_active", "is_sponsored",
        "position", "page_number", "allowed_countries",
    }
)


class ContentService[ReadSchema: BaseModel]:
    """CRUD, bulk actions and CSV export for one tenant entity.

    Subclasses customise writes through prepare_create / prepare_update.
    Every write is audited; remote failures are audited as failures and
    re-raised.
    """

    entity_type: str
    csv_columns: list[str]

    def __init__(self, repo: RemoteRepository[ReadSchema], audit: AuditService):
        self.repo = repo
        self.audit = audit

    @property
    def tenant_slug(self) -> str:
        return self.repo.conn.slug

    def supported_bulk_actions(self) -> set[BulkAction]:
        if self.repo.has_active_flag:
            return {BulkAction.ACTIVATE, BulkAction.DEACTIVATE, BulkAction.DELETE}
        return {BulkAction.DELETE}

    async def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        return data

    async def prepare_update(self, data: dict[str, Any]) -> dict[str, Any]:
        return data

    async def list_page(
        self,
        filters: dict[str, Any] | None = None,
        page: int = 1,
        page_size: int = 50,
    ) -> Page[ReadSchema]:
        start, end = page_bounds(page, page_size)
        items, total = await self.repo.list_page(filters, start, end)
        return Page.build(items, total, page, page_size)

    async def get(self, id: Any) -> ReadSchema | None:
        return await self.repo.get(id)

    async def create(self, payload: BaseModel) -> ReadSchema:
        data = await self.prepare_create(payload.model_dump(exclude_none=True, mode="json"))
        try:
            item = await self.repo.create(data)
        except TenantBackendError as e:
            await self.audit.log_failure(AuditAction.CONTENT_CREATE, self.entity_type, e.message)
            raise
        item_id = getattr(item, "id", None)
        logger.info("Content created", tenant=self.tenant_slug, entity=self.entity_type, id=item_id)
        await self.audit.log_success(
            AuditAction.CONTENT_CREATE, self.entity_type, entity_id=item_id, changes=data
        )
        return item

    async def update(self, id: Any, payload: BaseModel) -> ReadSchema | None:
        data = {
            key: value
            for key, value in payload.model_dump(exclude_unset=True, mode="json").items()
            if value is not None or key not in NON_NULLABLE_FIELDS
        }
        data = await self.prepare_update(data)
        if not data:
            return await self.repo.get(id)
        try:
            item = await self.repo.update(id, data)
        except TenantBackendError as e:
            await self.audit.log_failure(
                AuditAction.CONTENT_UPDATE, self.entity_type, e.message, entity_id=id
            )
            raise
        if item is not None:
            await self.audit.log_success(
                AuditAction.CONTENT_UPDATE, self.entity_type, entity_id=id, changes=data
            )
        return item

    async def delete(self, id: Any) -> bool:
        try:
            deleted = await self.repo.delete(id)
        except TenantBackendError as e:
            await self.audit.log_failure(
                AuditAction.CONTENT_DELETE, self.entity_type, e.message, entity_id=id
            )
            raise
        if deleted:
            await self.audit.log_success(AuditAction.CONTENT_DELETE, self.entity_type, entity_id=id)
        return deleted

    def bulk_values(self, action: BulkAction) -> dict[str, Any]:
        if action == BulkAction.ACTIVATE:
            return {"is_active": True}
        if action == BulkAction.DEACTIVATE:
            return {"is_active": False}
        raise ValueError(f"Unsupported bulk action '{action.value}'")

    async def bulk(self, action: BulkAction, ids: list[str]) -> BulkActionResult:
        """Apply one action to every selected row.

        Raises:
            ValueError: If the entity does not support the action.
        """
        if action not in self.supported_bulk_actions():
            raise ValueError(f"Bulk action '{action.value}' is not supported for {self.entity_type}")

        unique_ids = list(dict.fromkeys(ids))
        try:
            if action == BulkAction.DELETE:
                affected = await self.repo.bulk_delete(unique_ids)
            else:
                affected = await self.repo.bulk_update(unique_ids, self.bulk_values(action))
        except TenantBackendError as e:
            await self.audit.log_failure(AuditAction.CONTENT_BULK, self.entity_type, e.message)
            raise

        logger.info(
            "Bulk action applied",
            tenant=self.tenant_slug,
            entity=self.entity_type,
            action=action.value,
            affected=affected,
        )
        await self.audit.log_success(
            AuditAction.CONTENT_BULK,
            self.entity_type,
            changes={"action": action.value, "ids": unique_ids, "affected": affected},
        )
        return BulkActionResult(action=action, requested=len(unique_ids), affected=affected)

    async def export_csv(self, filters: dict[str, Any] | None = None) -> str:
        rows = await self.repo.list_all(filters)
        return csv_export.to_csv(rows, self.csv_columns)


class CategoryService(ContentService):
    entity_type = "category"
    csv_columns = csv_export.CATEGORY_COLUMNS

    def __init__(self, repo: CategoryRepository, audit: AuditService):
        super().__init__(repo, audit)

    async def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        if not data.get("slug"):
            data["slug"] = slugify(data["name"])
        return data


class RelatedSearchService(ContentService):
    entity_type = "related_search"
    csv_columns = csv_export.RELATED_SEARCH_COLUMNS

    def __init__(self, repo: RelatedSearchRepository, audit: AuditService):
        super().__init__(repo, audit)
        self.searches = repo

    async def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        if data.get("display_order") is None and data.get("blog_id"):
            data["display_order"] = await self.searches.next_display_order(data["blog_id"])
        return data


class WebResultService(ContentService):
    entity_type = "web_result"
    csv_columns = csv_export.WEB_RESULT_COLUMNS

    def __init__(self, repo: WebResultRepository, audit: AuditService):
        super().__init__(repo, audit)


def generate_page_key(headline: str) -> str:
    """Readable unique key: slugified headline plus six hex characters."""
    base = slugify(headline)[:40].rstrip("-") or "page"
    return f"{base}-{secrets.token_hex(3)}"


class PrelandingService(ContentService):
    entity_type = "prelanding"
    csv_columns = csv_export.PRELANDING_COLUMNS

    def __init__(self, repo: PrelandingRepository, audit: AuditService):
        super().__init__(repo, audit)

    async def prepare_create(self, data: dict[str, Any]) -> dict[str, Any]:
        if not data.get("page_key"):
            data["page_key"] = generate_page_key(data.get("headline", ""))
        return data


class EmailCaptureService(ContentService):
    entity_type = "email_capture"
    csv_columns = csv_export.EMAIL_CAPTURE_COLUMNS

    def __init__(self, repo: EmailCaptureRepository, audit: AuditService):
        super().__init__(repo, audit)
