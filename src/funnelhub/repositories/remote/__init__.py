"""Repositories over tenant backends (PostgREST), one per content entity."""

from src.funnelhub.repositories.remote.base import RemoteRepository
from src.funnelhub.repositories.remote.content import (
    BlogRepository,
    CategoryRepository,
    EmailCaptureRepository,
    PrelandingRepository,
    RelatedSearchRepository,
    WebResultRepository,
)

__all__ = [
    "BlogRepository",
    "CategoryRepository",
    "EmailCaptureRepository",
    "PrelandingRepository",
    "RelatedSearchRepository",
    "RemoteRepository",
    "WebResultRepository",
]
