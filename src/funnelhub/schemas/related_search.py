from datetime import datetime

from pydantic import BaseModel, Field, field_validator

WORLDWIDE = "WW"


def _normalize_countries(v: list[str] | None) -> list[str] | None:
    if v is None:
        return None
    codes = [c.strip().upper() for c in v if c and c.strip()]
    return codes or [WORLDWIDE]


class RelatedSearchCreate(BaseModel):
    search_text: str = Field(min_length=1, max_length=300)
    title: str | None = Field(default=None, max_length=300)
    blog_id: str | None = None
    category_id: int | None = None
    display_order: int | None = Field(default=None, ge=0)
    position: int | None = Field(default=None, ge=0)
    allowed_countries: list[str] = Field(default_factory=lambda: [WORLDWIDE])
    web_result_page: int | None = Field(default=None, ge=1)
    pre_landing_page_key: str | None = Field(default=None, max_length=200)
    is_active: bool = True

    @field_validator("search_text")
    @classmethod
    def validate_search_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Search text cannot be empty or whitespace only")
        return v

    @field_validator("allowed_countries")
    @classmethod
    def validate_countries(cls, v: list[str]) -> list[str]:
        return _normalize_countries(v) or [WORLDWIDE]


class RelatedSearchUpdate(BaseModel):
    search_text: str | None = Field(default=None, min_length=1, max_length=300)
    title: str | None = Field(default=None, max_length=300)
    blog_id: str | None = None
    category_id: int | None = None
    display_order: int | None = Field(default=None, ge=0)
    position: int | None = Field(default=None, ge=0)
    allowed_countries: list[str] | None = None
    web_result_page: int | None = Field(default=None, ge=1)
    pre_landing_page_key: str | None = Field(default=None, max_length=200)
    is_active: bool | None = None

    @field_validator("allowed_countries")
    @classmethod
    def validate_countries(cls, v: list[str] | None) -> list[str] | None:
        return _normalize_countries(v)


class RelatedSearchRead(BaseModel):
    id: str
    search_text: str | None = None
    title: str | None = None
    blog_id: str | None = None
    category_id: int | None = None
    display_order: int | None = None
    position: int | None = None
    allowed_countries: list[str] | None = None
    web_result_page: int | None = None
    pre_landing_page_key: str | None = None
    is_active: bool = True
    created_at: datetime | None = None

    @property
    def label(self) -> str:
        return self.search_text or self.title or ""
