from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.funnelhub.models import BlogStatus


class BlogCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    slug: str | None = Field(default=None, max_length=300)
    author: str | None = Field(default=None, max_length=100)
    content: str | None = None
    featured_image: str | None = Field(default=None, max_length=1000)
    category_id: int | None = None
    status: BlogStatus = BlogStatus.DRAFT

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Blog title cannot be empty or whitespace only")
        return v


class BlogUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=300)
    slug: str | None = Field(default=None, max_length=300)
    author: str | None = Field(default=None, max_length=100)
    content: str | None = None
    featured_image: str | None = Field(default=None, max_length=1000)
    category_id: int | None = None
    status: BlogStatus | None = None


class BlogRead(BaseModel):
    id: str
    title: str
    slug: str
    author: str | None = None
    content: str | None = None
    featured_image: str | None = None
    category_id: int | None = None
    status: str = BlogStatus.DRAFT.value
    serial_number: int | None = None
    published_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
