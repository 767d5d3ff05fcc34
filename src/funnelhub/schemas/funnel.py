"""Visitor-facing views of a tenant's funnel."""

from pydantic import BaseModel, EmailStr, Field


class RelatedSearchLink(BaseModel):
    id: str
    search_text: str
    href: str
    button_id: str


class RelatedSearchLinks(BaseModel):
    country: str
    items: list[RelatedSearchLink]


class WebResultCard(BaseModel):
    id: str
    title: str
    description: str | None = None
    name: str | None = None
    url: str | None = None
    logo_url: str | None = None
    is_sponsored: bool = False
    position: int | None = None
    has_prelanding: bool = False
    click_url: str | None = None


class WebResultListing(BaseModel):
    related_search_id: str | None = None
    sponsored: list[WebResultCard]
    organic: list[WebResultCard]


class EmailCaptureSubmit(BaseModel):
    email: EmailStr
    redirect: str | None = Field(default=None, max_length=2000)
    source: str | None = Field(default=None, max_length=2000)


class EmailCaptureResult(BaseModel):
    captured: bool = True
    country: str
    redirect_url: str | None = None
