"""Unified analytics across every active tenant project."""

from typing import Annotated

from fastapi import APIRouter, HTTPException, Query, Response, status

from src.funnelhub.api.dependencies import AnalyticsServiceDep
from src.funnelhub.models import AnalyticsPeriod
from src.funnelhub.schemas.analytics import AnalyticsReport
from src.funnelhub.schemas.pagination import MAX_PAGE_SIZE
from src.funnelhub.services.analytics import ALL_SITES
from src.funnelhub.utils.csv_export import export_filename

router = APIRouter(prefix="/analytics", tags=["analytics"])

PeriodQuery = Annotated[AnalyticsPeriod, Query(description="Reporting window")]
SiteQuery = Annotated[str, Query(description="'all' or one tenant project slug")]
RefreshQuery = Annotated[bool, Query(description="Bypass the snapshot cache")]


def _unknown_site(e: ValueError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


@router.get(
    "",
    response_model=AnalyticsReport,
    responses={404: {"description": "Unknown or inactive site"}},
)
async def get_analytics(
    service: AnalyticsServiceDep,
    period: PeriodQuery = AnalyticsPeriod.TODAY,
    site: SiteQuery = ALL_SITES,
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int | None, Query(ge=1, le=MAX_PAGE_SIZE)] = None,
    refresh: RefreshQuery = False,
) -> AnalyticsReport:
    """Sessions and stats for the period, newest session first.

    A tenant whose backend fails is reported under `errors` with empty stats
    instead of failing the whole report.
    """
    try:
        return await service.report(
            period=period, site=site, page=page, page_size=page_size, refresh=refresh
        )
    except ValueError as e:
        raise _unknown_site(e) from e


@router.get(
    "/export",
    response_class=Response,
    responses={
        200: {"content": {"text/csv": {}}},
        404: {"description": "Unknown or inactive site"},
    },
)
async def export_analytics(
    service: AnalyticsServiceDep,
    period: PeriodQuery = AnalyticsPeriod.TODAY,
    site: SiteQuery = ALL_SITES,
    refresh: RefreshQuery = False,
) -> Response:
    try:
        content = await service.export_csv(period=period, site=site, refresh=refresh)
    except ValueError as e:
        raise _unknown_site(e) from e
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{export_filename("analytics")}"'},
    )
