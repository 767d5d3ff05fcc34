from datetime import datetime

from pydantic import BaseModel, EmailStr, Field


class EmailCaptureCreate(BaseModel):
    email: EmailStr
    page_key: str | None = Field(default=None, max_length=200)
    source: str | None = Field(default=None, max_length=2000)
    country: str | None = Field(default=None, max_length=50)


class EmailCaptureRead(BaseModel):
    id: str
    email: str
    page_key: str | None = None
    source: str | None = None
    country: str | None = None
    captured_at: datetime | None = None


class EmailCaptureUpdate(BaseModel):
    email: EmailStr | None = None
    page_key: str | None = Field(default=None, max_length=200)
    source: str | None = Field(default=None, max_length=2000)
    country: str | None = Field(default=None, max_length=50)
