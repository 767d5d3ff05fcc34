from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from src.funnelhub.core.validators import validate_http_url


class WebResultCreate(BaseModel):
    title: str = Field(min_length=1, max_length=300)
    description: str | None = Field(default=None, max_length=2000)
    name: str | None = Field(default=None, max_length=200)
    url: str = Field(max_length=2000)
    logo_url: str | None = Field(default=None, max_length=1000)
    is_sponsored: bool = False
    is_active: bool = True
    position: int = Field(default=0, ge=0)
    page_number: int = Field(default=1, ge=1)
    related_search_id: str | None = None
    pre_landing_page_key: str | None = Field(default=None, max_length=200)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        return validate_http_url(v)


class WebResultUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=300)
    description: str | None = Field(default=None, max_length=2000)
    name: str | None = Field(default=None, max_length=200)
    url: str | None = Field(default=None, max_length=2000)
    logo_url: str | None = Field(default=None, max_length=1000)
    is_sponsored: bool | None = None
    is_active: bool | None = None
    position: int | None = Field(default=None, ge=0)
    page_number: int | None = Field(default=None, ge=1)
    related_search_id: str | None = None
    pre_landing_page_key: str | None = Field(default=None, max_length=200)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str | None) -> str | None:
        return validate_http_url(v) if v is not None else None


class WebResultRead(BaseModel):
    id: str
    title: str
    description: str | None = None
    name: str | None = None
    url: str | None = None
    logo_url: str | None = None
    is_sponsored: bool = False
    is_active: bool = True
    position: int | None = None
    page_number: int | None = None
    related_search_id: str | None = None
    pre_landing_page_key: str | None = None
    created_at: datetime | None = None
