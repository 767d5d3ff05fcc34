"""Read one tenant's tracking tables and fold them into a SiteSnapshot."""

import asyncio
from datetime import datetime
from typing import Any

from src.funnelhub.core.exceptions import TenantBackendError
from src.funnelhub.core.logging import get_logger
from src.funnelhub.integrations.postgrest import PostgrestError, QueryBuilder, QueryResult
from src.funnelhub.models import AnalyticsFlavor
from src.funnelhub.schemas.analytics import SiteSnapshot
from src.funnelhub.services.analytics.folding import (
    SiteRef,
    fold_email_submissions,
    fold_event_log,
    fold_link_tracking,
    fold_session_summary,
    fold_session_tables,
)
from src.funnelhub.tenancy.clients import TenantConnection

logger = get_logger(__name__)

# PostgREST caps responses (1000 rows on Supabase); read in windows of this size
BATCH_SIZE = 1000
MAX_ROWS = 50_000


class TrackingSource:
    """Row access shared by every flavor, in canonical field names."""

    def __init__(self, conn: TenantConnection):
        self.conn = conn
        self.profile = conn.profile
        self.site = SiteRef(slug=conn.slug, name=conn.name)

    async def _run(self, entity: str, builder: QueryBuilder) -> QueryResult:
        try:
            return await builder.execute()
        except PostgrestError as e:
            raise TenantBackendError(
                self.conn.slug,
                f"{self.profile.table(entity)}: {e.message}",
                status_code=e.status_code,
                details=e.details,
            ) from e

    async def rows(self, entity: str, since: datetime | None) -> list[dict[str, Any]]:
        """All rows of an analytics table newer than `since`, newest first."""
        column = self.profile.column(entity, "timestamp")
        collected: list[dict[str, Any]] = []
        start = 0
        while start < MAX_ROWS:
            builder = self.conn.client.table(self.profile.table(entity)).select("*")
            if since is not None:
                builder = builder.gte(column, since.isoformat())
            builder = builder.order(column, desc=True).range(start, start + BATCH_SIZE - 1)
            batch = (await self._run(entity, builder)).data or []
            collected.extend(self.profile.from_row(entity, row) for row in batch)
            if len(batch) < BATCH_SIZE:
                break
            start += BATCH_SIZE
        else:
            logger.warning(
                "Analytics row cap reached", tenant=self.conn.slug, entity=entity, rows=MAX_ROWS
            )
        return collected

    async def names(self, entity: str, ids: set[str], field: str) -> dict[str, str]:
        """id -> display name for the given content rows."""
        if not ids:
            return {}
        builder = (
            self.conn.client.table(self.profile.table(entity))
            .select(self.profile.select_list(entity, ["id", field]))
            .in_("id", sorted(ids))
        )
        names: dict[str, str] = {}
        for row in (await self._run(entity, builder)).data or []:
            item = self.profile.from_row(entity, row)
            if item.get(field):
                names[str(item["id"])] = str(item[field])
        return names

    async def snapshot(self, since: datetime | None) -> SiteSnapshot:
        raise NotImplementedError


def _ids(rows: list[dict[str, Any]], key: str) -> set[str]:
    return {str(row[key]) for row in rows if row.get(key) is not None}


class EventLogSource(TrackingSource):
    async def snapshot(self, since: datetime | None) -> SiteSnapshot:
        events = await self.rows("events", since)
        search_names, blog_names = await asyncio.gather(
            self.names("related_searches", _ids(events, "related_search_id"), "search_text"),
            self.names("blogs", _ids(events, "blog_id"), "title"),
        )
        return fold_event_log(events, self.site, search_names, blog_names)


class SessionSummarySource(TrackingSource):
    async def snapshot(self, since: datetime | None) -> SiteSnapshot:
        return fold_session_summary(await self.rows("events", since), self.site)


class EmailSubmissionSource(TrackingSource):
    async def snapshot(self, since: datetime | None) -> SiteSnapshot:
        return fold_email_submissions(await self.rows("submissions", since), self.site)


class SessionTablesSource(TrackingSource):
    async def snapshot(self, since: datetime | None) -> SiteSnapshot:
        sessions, page_views, clicks = await asyncio.gather(
            self.rows("sessions", since),
            self.rows("page_views", since),
            self.rows("clicks", since),
        )
        return fold_session_tables(sessions, page_views, clicks, self.site)


class LinkTrackingSource(TrackingSource):
    async def snapshot(self, since: datetime | None) -> SiteSnapshot:
        sessions, clicks = await asyncio.gather(
            self.rows("sessions", since),
            self.rows("link_clicks", since),
        )
        search_names, result_names = await asyncio.gather(
            self.names("related_searches", _ids(clicks, "related_search_id"), "search_text"),
            self.names("web_results", _ids(clicks, "web_result_id"), "title"),
        )
        return fold_link_tracking(sessions, clicks, self.site, search_names, result_names)


SOURCES: dict[AnalyticsFlavor, type[TrackingSource]] = {
    AnalyticsFlavor.EVENT_LOG: EventLogSource,
    AnalyticsFlavor.SESSION_SUMMARY: SessionSummarySource,
    AnalyticsFlavor.EMAIL_SUBMISSIONS: EmailSubmissionSource,
    AnalyticsFlavor.SESSION_TABLES: SessionTablesSource,
    AnalyticsFlavor.LINK_TRACKING: LinkTrackingSource,
}


def source_for(conn: TenantConnection) -> TrackingSource:
    return SOURCES[conn.profile.flavor](conn)
