import re

MIN_TENANT_SLUG_LENGTH = 3
MAX_TENANT_SLUG_LENGTH = 56

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")
_SLUGIFY_STRIP = re.compile(r"[^a-z0-9]+")


def validate_tenant_slug(slug: str) -> str:
    """Validate a tenant project slug: lowercase words joined by hyphens."""
    if not MIN_TENANT_SLUG_LENGTH <= len(slug) <= MAX_TENANT_SLUG_LENGTH:
        raise ValueError(
            f"Slug must be {MIN_TENANT_SLUG_LENGTH}-{MAX_TENANT_SLUG_LENGTH} characters"
        )
    if not _SLUG_PATTERN.match(slug):
        raise ValueError("Slug may only contain lowercase letters, digits and single hyphens")
    return slug


def slugify(text: str) -> str:
    """Lowercase text with every run of non-alphanumerics collapsed to '-'."""
    return _SLUGIFY_STRIP.sub("-", text.lower()).strip("-")


def validate_http_url(url: str) -> str:
    url = url.strip()
    if not url.startswith(("http://", "https://")):
        raise ValueError("URL must start with http:// or https://")
    return url.rstrip("/")
