"""Shared enums for models and schemas."""

from enum import Enum


class AnalyticsFlavor(str, Enum):
    """Tracking schema a tenant project writes its analytics into."""

    EVENT_LOG = "event_log"  # one analytics table of typed events
    SESSION_SUMMARY = "session_summary"  # one pre-aggregated row per session
    EMAIL_SUBMISSIONS = "email_submissions"  # email captures only
    SESSION_TABLES = "session_tables"  # sessions + page_views + clicks
    LINK_TRACKING = "link_tracking"  # sessions + link click table


class BlogStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class BulkAction(str, Enum):
    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    PUBLISH = "publish"
    UNPUBLISH = "unpublish"
    DELETE = "delete"


class AnalyticsPeriod(str, Enum):
    TODAY = "today"
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    ALL = "all"
