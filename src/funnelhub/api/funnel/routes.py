"""Public funnel endpoints used by the tenant sites' visitors.

No admin key: these serve anonymous traffic, and only for active projects.
"""

from typing import Annotated

from fastapi import APIRouter, Header, HTTPException, Query, Request, status

from src.funnelhub.api.dependencies import FunnelServiceDep
from src.funnelhub.core.audit_context import get_client_ip
from src.funnelhub.schemas.funnel import (
    EmailCaptureResult,
    EmailCaptureSubmit,
    RelatedSearchLinks,
    WebResultListing,
)
from src.funnelhub.schemas.prelanding import PrelandingRead

router = APIRouter(prefix="/funnel/{slug}", tags=["funnel"])

PAGE_NOT_FOUND = "Page not found"


def _client_ip(request: Request) -> str | None:
    return get_client_ip(
        request.headers.get("x-forwarded-for"),
        request.client.host if request.client else None,
    )


def _page_not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=PAGE_NOT_FOUND)


@router.get("/related-searches", response_model=RelatedSearchLinks)
async def related_searches(
    request: Request,
    service: FunnelServiceDep,
    blog_id: Annotated[str, Query(description="Blog the searches are shown under")],
    category_id: Annotated[int | None, Query(description="Fallback category")] = None,
) -> RelatedSearchLinks:
    """Up to four searches visible in the visitor's country."""
    return await service.related_searches(blog_id, category_id, _client_ip(request))


@router.get("/web-results", response_model=WebResultListing)
async def web_results(
    service: FunnelServiceDep,
    related_search_id: str | None = None,
    page: Annotated[int | None, Query(ge=1, description="Numbered results page")] = None,
) -> WebResultListing:
    return await service.web_results(related_search_id, page)


@router.get(
    "/prelandings",
    response_model=PrelandingRead,
    responses={404: {"description": PAGE_NOT_FOUND}},
)
async def prelanding_for_search(
    service: FunnelServiceDep,
    search: Annotated[str, Query(description="Related search id")],
) -> PrelandingRead:
    page = await service.prelanding_for_search(search)
    if page is None:
        raise _page_not_found()
    return page


@router.get(
    "/prelandings/{page_key}",
    response_model=PrelandingRead,
    responses={404: {"description": PAGE_NOT_FOUND}},
)
async def prelanding(page_key: str, service: FunnelServiceDep) -> PrelandingRead:
    page = await service.prelanding(page_key)
    if page is None:
        raise _page_not_found()
    return page


@router.post(
    "/prelandings/{page_key}/email",
    response_model=EmailCaptureResult,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"description": PAGE_NOT_FOUND}},
)
async def capture_email(
    page_key: str,
    submission: EmailCaptureSubmit,
    request: Request,
    service: FunnelServiceDep,
    referer: Annotated[str | None, Header()] = None,
) -> EmailCaptureResult:
    """Store the visitor's email and return where to send them next."""
    page = await service.prelanding(page_key)
    if page is None:
        raise _page_not_found()
    return await service.capture_email(page, submission, _client_ip(request), referer)
