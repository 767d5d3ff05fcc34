from src.funnelhub.services.analytics.folding import SiteRef, format_time_spent
from src.funnelhub.services.analytics.service import (
    ALL_SITES,
    UnifiedAnalyticsService,
    period_start,
)
from src.funnelhub.services.analytics.sources import source_for

__all__ = [
    "ALL_SITES",
    "SiteRef",
    "UnifiedAnalyticsService",
    "format_time_spent",
    "period_start",
    "source_for",
]
