from functools import lru_cache

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CORS_ORIGINS = ["http://localhost:3000"]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # App
    app_name: str = "Funnel Hub"
    app_env: str = "development"  # development, testing, production
    debug: bool = False
    enable_openapi: bool = True  # Set to False in production

    # Database (hub registry + audit trail)
    database_url: str
    database_pool_size: int = 5
    database_max_overflow: int = 10

    # CORS
    cors_origins: list[str] = DEFAULT_CORS_ORIGINS

    # Admin access - if set, /api/v1 requires X-Admin-Key
    admin_api_key: str | None = None

    # Metrics
    metrics_api_key: str | None = None  # If set, /metrics requires this key

    # Redis (optional - app works without it)
    redis_url: str | None = None  # e.g., "redis://localhost:6379/0"
    redis_pool_size: int = 10

    # Rate Limiting
    global_rate_limit_per_second: int = 10  # Max requests/second per IP
    global_rate_limit_burst: int = 20  # Token bucket burst capacity
    generation_rate_limit: str = "10/minute"  # slowapi syntax, per client IP

    # Tenant backends (Supabase REST)
    tenant_request_timeout_seconds: float = 15.0
    tenant_max_connections: int = 10

    # Analytics
    analytics_cache_ttl_seconds: int = 60
    analytics_default_page_size: int = 10

    # AI gateway (OpenAI-compatible chat completions)
    ai_gateway_url: str = "https://ai.gateway.lovable.dev/v1"
    ai_gateway_api_key: str | None = None
    ai_text_model: str = "google/gemini-2.5-flash"
    ai_image_model: str = "google/gemini-2.5-flash-image-preview"
    ai_request_timeout_seconds: float = 120.0

    # Geo-IP
    geoip_url: str = "https://ipapi.co"
    geoip_timeout_seconds: float = 3.0
    geoip_cache_ttl_seconds: int = 86400

    # Fallback imagery
    default_hero_image_url: str = (
        "https://images.unsplash.com/photo-1556742049-0cfed4f6a45d?w=800&q=80"
    )

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: list[str]) -> list[str]:
        """Reject wildcards - credentials are allowed on CORS requests."""
        for origin in v:
            if origin == "*":
                raise ValueError(
                    "CORS wildcard '*' is not allowed when allow_credentials=True. "
                    "Specify explicit origins instead."
                )
        return v

    @field_validator("ai_gateway_url", "geoip_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_production(self) -> "Settings":
        if self.app_env != "production":
            return self
        if self.debug:
            raise ValueError("DEBUG must be off in production")
        if self.cors_origins == DEFAULT_CORS_ORIGINS:
            raise ValueError("CORS_ORIGINS must be set explicitly in production")
        return self

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"


@lru_cache
def get_settings() -> Settings:
    return Settings()
