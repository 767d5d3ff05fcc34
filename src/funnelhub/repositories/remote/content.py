"""Remote repositories for each tenant content table."""

from typing import Any

from src.funnelhub.repositories.remote.base import RemoteRepository
from src.funnelhub.schemas.blog import BlogRead
from src.funnelhub.schemas.category import CategoryRead
from src.funnelhub.schemas.email_capture import EmailCaptureRead
from src.funnelhub.schemas.prelanding import PrelandingRead
from src.funnelhub.schemas.related_search import RelatedSearchRead
from src.funnelhub.schemas.web_result import WebResultRead


class CategoryRepository(RemoteRepository[CategoryRead]):
    entity = "categories"
    read_schema = CategoryRead
    default_order = "name"
    default_desc = False
    has_active_flag = False


class BlogRepository(RemoteRepository[BlogRead]):
    entity = "blogs"
    read_schema = BlogRead
    has_active_flag = False

    async def get_by_slug(self, slug: str) -> BlogRead | None:
        result = await self.run(self.query().select("*").eq(self.col("slug"), slug).maybe_single())
        return self.to_model(result.data) if result.data else None

    async def max_serial_number(self) -> int:
        column = self.col("serial_number")
        result = await self.run(
            self.query().select(column).order(column, desc=True, nulls_first=False).limit(1)
        )
        rows = result.data or []
        return int(rows[0].get(column) or 0) if rows else 0


class RelatedSearchRepository(RemoteRepository[RelatedSearchRead]):
    entity = "related_searches"
    read_schema = RelatedSearchRead
    default_order = "display_order"
    default_desc = False

    async def list_active_for(self, **filters: Any) -> list[RelatedSearchRead]:
        """Active rows for a blog_id or category_id, in display order."""
        return await self.list_all({**filters, "is_active": True})

    async def next_display_order(self, blog_id: str) -> int:
        column = self.col("display_order")
        result = await self.run(
            self.query()
            .select(column)
            .eq(self.col("blog_id"), blog_id)
            .order(column, desc=True, nulls_first=False)
            .limit(1)
        )
        rows = result.data or []
        current = rows[0].get(column) if rows else None
        return (current + 1) if current is not None else 0


class WebResultRepository(RemoteRepository[WebResultRead]):
    entity = "web_results"
    read_schema = WebResultRead
    default_order = "position"
    default_desc = False


class PrelandingRepository(RemoteRepository[PrelandingRead]):
    entity = "prelandings"
    read_schema = PrelandingRead

    async def get_by_key(self, page_key: str, active_only: bool = True) -> PrelandingRead | None:
        builder = self.query().select("*").eq(self.col("page_key"), page_key)
        if active_only:
            builder = builder.eq(self.col("is_active"), True)
        result = await self.run(builder.maybe_single())
        return self.to_model(result.data) if result.data else None

    async def web_result_ids_with_page(self, web_result_ids: list[str]) -> set[str]:
        """Subset of web_result_ids that have a pre-landing page configured."""
        if not web_result_ids:
            return set()
        column = self.col("web_result_id")
        result = await self.run(self.query().select(column).in_(column, web_result_ids))
        return {str(row[column]) for row in result.data or [] if row.get(column) is not None}


class EmailCaptureRepository(RemoteRepository[EmailCaptureRead]):
    entity = "email_captures"
    read_schema = EmailCaptureRead
    default_order = "captured_at"
    has_active_flag = False
