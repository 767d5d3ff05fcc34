"""Per-tenant content admin endpoints.

Every content table gets the same surface: list, export, get, create,
patch, delete and bulk actions. build_content_router stamps it out for one
entity; the entity-specific bits are the schemas, the service dependency and
the list filters.
"""

from typing import Annotated, Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from pydantic import BaseModel

from src.funnelhub.api.dependencies import (
    BlogServiceDep,
    CategoryServiceDep,
    EmailCaptureServiceDep,
    PrelandingServiceDep,
    RelatedSearchServiceDep,
    WebResultServiceDep,
)
from src.funnelhub.models import BlogStatus
from src.funnelhub.schemas.blog import BlogCreate, BlogRead, BlogUpdate
from src.funnelhub.schemas.bulk import BulkActionRequest, BulkActionResult
from src.funnelhub.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from src.funnelhub.schemas.email_capture import (
    EmailCaptureCreate,
    EmailCaptureRead,
    EmailCaptureUpdate,
)
from src.funnelhub.schemas.pagination import MAX_PAGE_SIZE, Page
from src.funnelhub.schemas.prelanding import PrelandingCreate, PrelandingRead, PrelandingUpdate
from src.funnelhub.schemas.related_search import (
    RelatedSearchCreate,
    RelatedSearchRead,
    RelatedSearchUpdate,
)
from src.funnelhub.schemas.web_result import WebResultCreate, WebResultRead, WebResultUpdate
from src.funnelhub.utils.csv_export import export_filename

PageQuery = Annotated[int, Query(ge=1, description="1-based page number")]
PageSizeQuery = Annotated[int, Query(ge=1, le=MAX_PAGE_SIZE, description="Rows per page")]


def _present(**filters: Any) -> dict[str, Any]:
    return {key: value for key, value in filters.items() if value is not None}


def no_filters() -> dict[str, Any]:
    return {}


def blog_filters(
    status: BlogStatus | None = None,
    category_id: int | None = None,
) -> dict[str, Any]:
    return _present(status=status.value if status else None, category_id=category_id)


def related_search_filters(
    blog_id: str | None = None,
    category_id: int | None = None,
    is_active: bool | None = None,
) -> dict[str, Any]:
    return _present(blog_id=blog_id, category_id=category_id, is_active=is_active)


def web_result_filters(
    related_search_id: str | None = None,
    page_number: int | None = Query(default=None, ge=1),
    is_sponsored: bool | None = None,
    is_active: bool | None = None,
) -> dict[str, Any]:
    return _present(
        related_search_id=related_search_id,
        page_number=page_number,
        is_sponsored=is_sponsored,
        is_active=is_active,
    )


def prelanding_filters(
    related_search_id: str | None = None,
    web_result_id: str | None = None,
    is_active: bool | None = None,
) -> dict[str, Any]:
    return _present(
        related_search_id=related_search_id, web_result_id=web_result_id, is_active=is_active
    )


def email_capture_filters(
    page_key: str | None = None,
    country: str | None = None,
) -> dict[str, Any]:
    return _present(page_key=page_key, country=country.upper() if country else None)


def build_content_router(
    *,
    path: str,
    label: str,
    export_name: str,
    service_dep: Any,
    read_schema: type[BaseModel],
    create_schema: type[BaseModel],
    update_schema: type[BaseModel],
    filters: Any = no_filters,
) -> APIRouter:
    router = APIRouter(prefix=f"/tenants/{{slug}}/{path}", tags=[path])
    Filters = Annotated[dict[str, Any], Depends(filters)]

    def _not_found(item_id: str) -> HTTPException:
        return HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{label} '{item_id}' not found",
        )

    @router.get("", response_model=Page[read_schema], summary=f"List {path}")
    async def list_items(
        service: service_dep,
        query: Filters,
        page: PageQuery = 1,
        page_size: PageSizeQuery = 50,
    ) -> Any:
        return await service.list_page(query, page, page_size)

    @router.get(
        "/export.csv",
        response_class=Response,
        responses={200: {"content": {"text/csv": {}}}},
        summary=f"Export {path} as CSV",
    )
    async def export_items(service: service_dep, query: Filters) -> Response:
        return Response(
            content=await service.export_csv(query),
            media_type="text/csv",
            headers={
                "Content-Disposition": f'attachment; filename="{export_filename(export_name)}"'
            },
        )

    @router.post(
        "/bulk",
        response_model=BulkActionResult,
        responses={400: {"description": "Action not supported for this entity"}},
        summary=f"Bulk action on {path}",
    )
    async def bulk_items(request: BulkActionRequest, service: service_dep) -> BulkActionResult:
        try:
            return await service.bulk(request.action, request.ids)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e

    @router.get("/{item_id}", response_model=read_schema, summary=f"Get one of {path}")
    async def get_item(item_id: str, service: service_dep) -> Any:
        item = await service.get(item_id)
        if item is None:
            raise _not_found(item_id)
        return item

    @router.post(
        "",
        response_model=read_schema,
        status_code=status.HTTP_201_CREATED,
        responses={409: {"description": "Conflicts with an existing row"}},
        summary=f"Create one of {path}",
    )
    async def create_item(payload: create_schema, service: service_dep) -> Any:  # type: ignore[valid-type]
        try:
            return await service.create(payload)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e

    @router.patch("/{item_id}", response_model=read_schema, summary=f"Update one of {path}")
    async def update_item(
        item_id: str,
        payload: update_schema,  # type: ignore[valid-type]
        service: service_dep,
    ) -> Any:
        try:
            item = await service.update(item_id, payload)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e)) from e
        if item is None:
            raise _not_found(item_id)
        return item

    @router.delete(
        "/{item_id}", status_code=status.HTTP_204_NO_CONTENT, summary=f"Delete one of {path}"
    )
    async def delete_item(item_id: str, service: service_dep) -> None:
        if not await service.delete(item_id):
            raise _not_found(item_id)

    return router


categories_router = build_content_router(
    path="categories",
    label="Category",
    export_name="categories",
    service_dep=CategoryServiceDep,
    read_schema=CategoryRead,
    create_schema=CategoryCreate,
    update_schema=CategoryUpdate,
)

blogs_router = build_content_router(
    path="blogs",
    label="Blog",
    export_name="blogs",
    service_dep=BlogServiceDep,
    read_schema=BlogRead,
    create_schema=BlogCreate,
    update_schema=BlogUpdate,
    filters=blog_filters,
)


@blogs_router.get("/by-slug/{blog_slug}", response_model=BlogRead, summary="Get a blog by slug")
async def get_blog_by_slug(blog_slug: str, service: BlogServiceDep) -> BlogRead:
    blog = await service.get_by_slug(blog_slug)
    if blog is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Blog '{blog_slug}' not found",
        )
    return blog


related_searches_router = build_content_router(
    path="related-searches",
    label="Related search",
    export_name="related-searches",
    service_dep=RelatedSearchServiceDep,
    read_schema=RelatedSearchRead,
    create_schema=RelatedSearchCreate,
    update_schema=RelatedSearchUpdate,
    filters=related_search_filters,
)

web_results_router = build_content_router(
    path="web-results",
    label="Web result",
    export_name="web-results",
    service_dep=WebResultServiceDep,
    read_schema=WebResultRead,
    create_schema=WebResultCreate,
    update_schema=WebResultUpdate,
    filters=web_result_filters,
)

prelandings_router = build_content_router(
    path="prelandings",
    label="Pre-landing page",
    export_name="prelandings",
    service_dep=PrelandingServiceDep,
    read_schema=PrelandingRead,
    create_schema=PrelandingCreate,
    update_schema=PrelandingUpdate,
    filters=prelanding_filters,
)

email_captures_router = build_content_router(
    path="email-captures",
    label="Email capture",
    export_name="email-captures",
    service_dep=EmailCaptureServiceDep,
    read_schema=EmailCaptureRead,
    create_schema=EmailCaptureCreate,
    update_schema=EmailCaptureUpdate,
    filters=email_capture_filters,
)

routers = [
    categories_router,
    blogs_router,
    related_searches_router,
    web_results_router,
    prelandings_router,
    email_captures_router,
]
