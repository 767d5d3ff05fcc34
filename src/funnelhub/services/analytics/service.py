"""Cross-tenant analytics: fan out, fold, cache, merge, paginate."""

import asyncio
import math
from datetime import UTC, datetime, timedelta

from pydantic import ValidationError

from src.funnelhub.core import cache
from src.funnelhub.core.config import get_settings
from src.funnelhub.core.logging import get_logger
from src.funnelhub.models import AnalyticsPeriod, TenantProject
from src.funnelhub.schemas.analytics import (
    AnalyticsReport,
    SessionDetail,
    SiteSnapshot,
    SiteStats,
    SiteSummary,
)
from src.funnelhub.schemas.pagination import MAX_PAGE_SIZE
from src.funnelhub.services.analytics.sources import source_for
from src.funnelhub.tenancy.clients import TenantClientRegistry
from src.funnelhub.utils.csv_export import SESSION_COLUMNS, to_csv

logger = get_logger(__name__)

ALL_SITES = "all"

_PERIOD_DAYS = {
    AnalyticsPeriod.LAST_7_DAYS: 7,
    AnalyticsPeriod.LAST_30_DAYS: 30,
}


def period_start(period: AnalyticsPeriod, now: datetime | None = None) -> datetime | None:
    """Inclusive lower bound for a period; None means unbounded."""
    now = now or datetime.now(UTC)
    if period == AnalyticsPeriod.TODAY:
        return now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period in _PERIOD_DAYS:
        return now - timedelta(days=_PERIOD_DAYS[period])
    return None


def empty_snapshot(project: TenantProject) -> SiteSnapshot:
    return SiteSnapshot(
        site_slug=project.slug, site_name=project.name, stats=SiteStats(), sessions=[]
    )


class UnifiedAnalyticsService:
    def __init__(
        self,
        projects: list[TenantProject],
        clients: TenantClientRegistry,
        cache_ttl: int | None = None,
    ):
        self.projects = [p for p in projects if p.is_active]
        self.clients = clients
        self.cache_ttl = (
            get_settings().analytics_cache_ttl_seconds if cache_ttl is None else cache_ttl
        )

    def targets(self, site: str) -> list[TenantProject]:
        if site == ALL_SITES:
            return self.projects
        matches = [p for p in self.projects if p.slug == site]
        if not matches:
            raise ValueError(f"Unknown site '{site}'")
        return matches

    async def site_snapshot(
        self,
        project: TenantProject,
        period: AnalyticsPeriod,
        refresh: bool = False,
        now: datetime | None = None,
    ) -> SiteSnapshot:
        key = cache.cache_key(cache.PREFIX_ANALYTICS, project.slug, period.value)
        if not refresh:
            cached = await cache.get_json(key)
            if cached is not None:
                try:
                    return SiteSnapshot.model_validate(cached)
                except ValidationError:
                    logger.warning("Ignoring stale analytics cache entry", key=key)

        conn = await self.clients.connect(project)
        snapshot = await source_for(conn).snapshot(period_start(period, now))
        await cache.set_json(key, snapshot.model_dump(mode="json"), self.cache_ttl)
        return snapshot

    async def collect(
        self,
        period: AnalyticsPeriod,
        site: str = ALL_SITES,
        refresh: bool = False,
        now: datetime | None = None,
    ) -> tuple[list[SiteSnapshot], dict[str, str]]:
        """Snapshots for every targeted tenant plus errors for the ones that failed."""
        targets = self.targets(site)
        results = await asyncio.gather(
            *(self.site_snapshot(p, period, refresh, now) for p in targets),
            return_exceptions=True,
        )

        snapshots: list[SiteSnapshot] = []
        errors: dict[str, str] = {}
        for project, result in zip(targets, results, strict=True):
            if isinstance(result, BaseException):
                if not isinstance(result, Exception):
                    raise result
                logger.warning(
                    "Tenant analytics failed",
                    tenant=project.slug,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                errors[project.slug] = str(result) or type(result).__name__
                snapshots.append(empty_snapshot(project))
            else:
                snapshots.append(result)
        return snapshots, errors

    @staticmethod
    def merge_sessions(snapshots: list[SiteSnapshot]) -> list[SessionDetail]:
        sessions = [s for snapshot in snapshots for s in snapshot.sessions]
        sessions.sort(key=lambda s: s.timestamp, reverse=True)
        return sessions

    async def report(
        self,
        period: AnalyticsPeriod = AnalyticsPeriod.TODAY,
        site: str = ALL_SITES,
        page: int = 1,
        page_size: int | None = None,
        refresh: bool = False,
        now: datetime | None = None,
    ) -> AnalyticsReport:
        page_size = page_size or get_settings().analytics_default_page_size
        page_size = max(1, min(page_size, MAX_PAGE_SIZE))
        page = max(1, page)

        snapshots, errors = await self.collect(period, site, refresh, now)
        sessions = self.merge_sessions(snapshots)
        totals = sum((s.stats for s in snapshots), SiteStats())

        start = (page - 1) * page_size
        return AnalyticsReport(
            period=period,
            site=site,
            totals=totals,
            sites=[
                SiteSummary(site_slug=s.site_slug, site_name=s.site_name, stats=s.stats)
                for s in snapshots
            ],
            sessions=sessions[start : start + page_size],
            total=len(sessions),
            page=page,
            page_size=page_size,
            pages=math.ceil(len(sessions) / page_size) if sessions else 0,
            generated_at=now or datetime.now(UTC),
            errors=errors,
        )

    async def export_csv(
        self,
        period: AnalyticsPeriod = AnalyticsPeriod.TODAY,
        site: str = ALL_SITES,
        refresh: bool = False,
    ) -> str:
        snapshots, _ = await self.collect(period, site, refresh)
        return to_csv(self.merge_sessions(snapshots), SESSION_COLUMNS)
