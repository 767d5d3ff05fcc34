from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.funnelhub.core.validators import validate_http_url


class _PrelandingFields(BaseModel):
    web_result_id: str | None = None
    related_search_id: str | None = None
    logo_url: str | None = Field(default=None, max_length=1000)
    logo_position: str | None = Field(default=None, max_length=20)
    logo_width: int | None = Field(default=None, ge=0)
    main_image_url: str | None = Field(default=None, max_length=1000)
    image_ratio: str | None = Field(default=None, max_length=20)
    headline: str | None = Field(default=None, max_length=300)
    description: str | None = Field(default=None, max_length=5000)
    headline_font_size: int | None = Field(default=None, ge=1)
    headline_color: str | None = Field(default=None, max_length=20)
    headline_align: str | None = Field(default=None, max_length=10)
    description_font_size: int | None = Field(default=None, ge=1)
    description_color: str | None = Field(default=None, max_length=20)
    description_align: str | None = Field(default=None, max_length=10)
    cta_color: str | None = Field(default=None, max_length=20)
    background_image_url: str | None = Field(default=None, max_length=1000)
    email_placeholder: str | None = Field(default=None, max_length=100)


class PrelandingCreate(_PrelandingFields):
    page_key: str | None = Field(default=None, max_length=200)
    headline: str = Field(min_length=1, max_length=300)
    cta_text: str = Field(default="Get Started", max_length=100)
    background_color: str = Field(default="#ffffff", max_length=20)
    target_url: str = Field(max_length=2000)
    is_active: bool = True

    @field_validator("target_url")
    @classmethod
    def validate_target_url(cls, v: str) -> str:
        return validate_http_url(v)


class PrelandingUpdate(_PrelandingFields):
    page_key: str | None = Field(default=None, max_length=200)
    cta_text: str | None = Field(default=None, max_length=100)
    background_color: str | None = Field(default=None, max_length=20)
    target_url: str | None = Field(default=None, max_length=2000)
    is_active: bool | None = None

    @field_validator("target_url")
    @classmethod
    def validate_target_url(cls, v: str | None) -> str | None:
        return validate_http_url(v) if v is not None else None


class PrelandingRead(_PrelandingFields):
    id: str
    page_key: str
    cta_text: str | None = None
    background_color: str | None = None
    target_url: str | None = None
    is_active: bool = True
    created_at: datetime | None = None
