"""Unified analytics reporting model."""

from datetime import datetime

from pydantic import BaseModel, Field

from src.funnelhub.models import AnalyticsPeriod


class SiteStats(BaseModel):
    sessions: int = 0
    page_views: int = 0
    unique_pages: int = 0
    total_clicks: int = 0
    unique_clicks: int = 0

    def __add__(self, other: "SiteStats") -> "SiteStats":
        return SiteStats(
            sessions=self.sessions + other.sessions,
            page_views=self.page_views + other.page_views,
            unique_pages=self.unique_pages + other.unique_pages,
            total_clicks=self.total_clicks + other.total_clicks,
            unique_clicks=self.unique_clicks + other.unique_clicks,
        )


class SearchResultBreakdown(BaseModel):
    term: str
    views: int = 0
    total_clicks: int = 0
    unique_clicks: int = 0
    visit_now_clicks: int = 0
    visit_now_unique: int = 0


class BlogClickBreakdown(BaseModel):
    title: str
    total_clicks: int = 0
    unique_clicks: int = 0


class ButtonInteraction(BaseModel):
    button: str
    total: int = 0
    unique: int = 0


class SessionDetail(BaseModel):
    session_id: str
    site_slug: str
    site_name: str
    device: str
    ip_address: str
    country: str
    time_spent: str = "0s"
    timestamp: datetime
    page_views: int = 0
    unique_pages: int = 0
    total_clicks: int = 0
    unique_clicks: int = 0
    search_results: list[SearchResultBreakdown] = Field(default_factory=list)
    blog_clicks: list[BlogClickBreakdown] = Field(default_factory=list)
    button_interactions: list[ButtonInteraction] = Field(default_factory=list)


class SiteSnapshot(BaseModel):
    """One tenant's normalised analytics for a period."""

    site_slug: str
    site_name: str
    stats: SiteStats
    sessions: list[SessionDetail]


class SiteSummary(BaseModel):
    site_slug: str
    site_name: str
    stats: SiteStats


class AnalyticsReport(BaseModel):
    period: AnalyticsPeriod
    site: str
    totals: SiteStats
    sites: list[SiteSummary]
    sessions: list[SessionDetail]
    total: int
    page: int
    page_size: int
    pages: int
    generated_at: datetime
    errors: dict[str, str] = Field(
        default_factory=dict,
        description="Tenants whose analytics could not be read, with the reason.",
    )
