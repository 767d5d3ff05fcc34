"""Fallback imagery used when generation fails or nothing was uploaded."""

DEFAULT_BLOG_IMAGES = [
    f"https://images.unsplash.com/{photo}?w=800&auto=format&fit=crop"
    for photo in (
        "photo-1499750310107-5fef28a66643",
        "photo-1432821596592-e2c18b78144f",
        "photo-1486312338219-ce68d2c6f44d",
        "photo-1488190211105-8b0e65b80b4e",
        "photo-1501504905252-473c47e087f8",
    )
]


def default_image_for_title(title: str) -> str:
    """Pick a default blog image deterministically from the title's character codes."""
    return DEFAULT_BLOG_IMAGES[sum(map(ord, title)) % len(DEFAULT_BLOG_IMAGES)]
