"""Pagination schemas.

Hub tables (audit log) page by opaque cursor. Tenant tables are read over
PostgREST, which pages by offset, so those lists use numbered pages.
"""

import base64
import math
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

MAX_PAGE_SIZE = 100


class PaginatedResponse(BaseModel, Generic[T]):
    """Cursor-paginated response. Clients pass next_cursor back verbatim."""

    items: list[T]
    next_cursor: str | None = Field(
        default=None,
        description="Opaque cursor for fetching the next page. None if no more pages.",
    )
    has_more: bool = Field(
        default=False,
        description="Whether there are more items after this page.",
    )


class Page(BaseModel, Generic[T]):
    """Offset-paginated response for tenant content."""

    items: list[T]
    total: int
    page: int
    page_size: int
    pages: int

    @classmethod
    def build(cls, items: list[T], total: int, page: int, page_size: int) -> "Page[T]":
        return cls(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            pages=math.ceil(total / page_size) if page_size else 0,
        )


def page_bounds(page: int, page_size: int) -> tuple[int, int]:
    """Inclusive (start, end) row offsets for a 1-based page."""
    start = (page - 1) * page_size
    return start, start + page_size - 1


def encode_cursor(value: str) -> str:
    return base64.urlsafe_b64encode(value.encode()).decode()


def decode_cursor(cursor: str) -> str:
    """Decode a cursor produced by encode_cursor.

    Raises:
        ValueError: If cursor is not valid base64 text.
    """
    try:
        return base64.urlsafe_b64decode(cursor.encode()).decode()
    except Exception as e:
        raise ValueError("Invalid cursor") from e
