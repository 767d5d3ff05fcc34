"""AI content generation endpoints.

Each call spends gateway credits, so all of them carry a per-IP slowapi
limit on top of the global token bucket.
"""

from fastapi import APIRouter, Request

from src.funnelhub.api.dependencies import GenerationServiceDep
from src.funnelhub.core.rate_limit import generation_limit, limiter
from src.funnelhub.schemas.generation import (
    BlogContentRequest,
    BlogContentResponse,
    BlogImageRequest,
    BlogImageResponse,
    OfferPrelandingContent,
    OfferPrelandingRequest,
    PrelandingContent,
    PrelandingContentRequest,
    WebResultsRequest,
    WebResultsResponse,
)

router = APIRouter(prefix="/generate", tags=["generation"])

GATEWAY_ERRORS = {
    400: {"description": "Required input missing"},
    402: {"description": "AI credits exhausted"},
    429: {"description": "Rate limited by the API or the AI gateway"},
    500: {"description": "AI gateway failure or not configured"},
}


@router.post("/blog-content", response_model=BlogContentResponse, responses=GATEWAY_ERRORS)
@limiter.limit(generation_limit)
async def generate_blog_content(
    request: Request, body: BlogContentRequest, service: GenerationServiceDep
) -> BlogContentResponse:
    """Write a blog article body for a title."""
    return await service.blog_content(body.title, body.slug)


@router.post("/web-results", response_model=WebResultsResponse, responses=GATEWAY_ERRORS)
@limiter.limit(generation_limit)
async def generate_web_results(
    request: Request, body: WebResultsRequest, service: GenerationServiceDep
) -> WebResultsResponse:
    """Search-result style cards for a related search term."""
    return await service.web_results(body)


@router.post("/prelanding-content", response_model=PrelandingContent, responses=GATEWAY_ERRORS)
@limiter.limit(generation_limit)
async def generate_prelanding_content(
    request: Request, body: PrelandingContentRequest, service: GenerationServiceDep
) -> PrelandingContent:
    """Pre-landing copy and a hero image for a web result."""
    return await service.prelanding_content(body)


@router.post("/offer-prelanding", response_model=OfferPrelandingContent, responses=GATEWAY_ERRORS)
@limiter.limit(generation_limit)
async def generate_offer_prelanding(
    request: Request, body: OfferPrelandingRequest, service: GenerationServiceDep
) -> OfferPrelandingContent:
    """Email-gated offer page copy; falls back to the default hero image."""
    return await service.offer_prelanding(body)


@router.post("/blog-image", response_model=BlogImageResponse, responses=GATEWAY_ERRORS)
@limiter.limit(generation_limit)
async def generate_blog_image(
    request: Request, body: BlogImageRequest, service: GenerationServiceDep
) -> BlogImageResponse:
    """Featured image for a blog. Never fails: uses a default image instead."""
    return await service.blog_image(body.blog_title)
