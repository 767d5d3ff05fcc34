"""Visitor-facing funnel: related searches -> web results -> pre-landing -> offer."""

from urllib.parse import quote, urlencode

from src.funnelhub.core.logging import get_logger
from src.funnelhub.integrations.geoip import UNKNOWN_COUNTRY, WORLDWIDE, GeoIPClient
from src.funnelhub.repositories.remote import (
    EmailCaptureRepository,
    PrelandingRepository,
    RelatedSearchRepository,
    WebResultRepository,
)
from src.funnelhub.schemas.funnel import (
    EmailCaptureResult,
    EmailCaptureSubmit,
    RelatedSearchLink,
    RelatedSearchLinks,
    WebResultCard,
    WebResultListing,
)
from src.funnelhub.schemas.prelanding import PrelandingRead
from src.funnelhub.schemas.related_search import RelatedSearchRead
from src.funnelhub.schemas.web_result import WebResultRead

logger = get_logger(__name__)

MAX_RELATED_SEARCHES = 4


def is_visible_in(allowed_countries: list[str] | None, country: str) -> bool:
    """Rows without a country list are shown everywhere; an empty list hides them."""
    if allowed_countries is None:
        return True
    return WORLDWIDE in allowed_countries or country in allowed_countries


def related_search_href(search: RelatedSearchRead) -> str:
    if search.pre_landing_page_key:
        return f"/prelanding?{urlencode({'page': search.pre_landing_page_key})}"
    return f"/wr?{urlencode({'wr': search.web_result_page or 1})}"


def web_result_click_url(result: WebResultRead, has_prelanding: bool) -> str | None:
    if result.pre_landing_page_key:
        return f"/prelanding?{urlencode({'page': result.pre_landing_page_key})}"
    if has_prelanding and result.related_search_id and result.url:
        return f"/prelanding?search={quote(result.related_search_id)}&redirect={quote(result.url, safe='')}"
    return result.url


class FunnelService:
    def __init__(
        self,
        searches: RelatedSearchRepository,
        web_results: WebResultRepository,
        prelandings: PrelandingRepository,
        email_captures: EmailCaptureRepository,
        geo: GeoIPClient,
    ):
        self.searches = searches
        self.web_results = web_results
        self.prelandings = prelandings
        self.email_captures = email_captures
        self.geo = geo

    async def related_searches(
        self,
        blog_id: str,
        category_id: int | None = None,
        client_ip: str | None = None,
    ) -> RelatedSearchLinks:
        """Up to four searches for a blog, falling back to its category's searches."""
        country = await self.geo.country_for(client_ip, fallback=WORLDWIDE)

        rows = await self.searches.list_active_for(blog_id=blog_id)
        if not rows and category_id is not None:
            rows = await self.searches.list_active_for(category_id=category_id)

        visible = [r for r in rows if is_visible_in(r.allowed_countries, country)]
        items = [
            RelatedSearchLink(
                id=r.id,
                search_text=r.label,
                href=related_search_href(r),
                button_id=f"related-search-{r.id}",
            )
            for r in visible[:MAX_RELATED_SEARCHES]
        ]
        return RelatedSearchLinks(country=country, items=items)

    async def web_results(
        self,
        related_search_id: str | None = None,
        page_number: int | None = None,
    ) -> WebResultListing:
        """Active results, optionally for one search and/or one numbered page, split by sponsorship."""
        filters: dict[str, object] = {"is_active": True}
        if related_search_id:
            filters["related_search_id"] = related_search_id
        if page_number is not None:
            filters["page_number"] = page_number

        results = await self.web_results.list_all(filters)
        with_page = await self.prelandings.web_result_ids_with_page([r.id for r in results])

        cards = []
        for result in results:
            has_prelanding = result.id in with_page
            cards.append(
                WebResultCard(
                    **result.model_dump(
                        include={
                            "id",
                            "title",
                            "description",
                            "name",
                            "url",
                            "logo_url",
                            "is_sponsored",
                            "position",
                        }
                    ),
                    has_prelanding=has_prelanding,
                    click_url=web_result_click_url(result, has_prelanding),
                )
            )

        return WebResultListing(
            related_search_id=related_search_id,
            sponsored=[c for c in cards if c.is_sponsored],
            organic=[c for c in cards if not c.is_sponsored],
        )

    async def prelanding(self, page_key: str) -> PrelandingRead | None:
        return await self.prelandings.get_by_key(page_key)

    async def prelanding_for_search(self, related_search_id: str) -> PrelandingRead | None:
        pages = await self.prelandings.list_all(
            {"related_search_id": related_search_id, "is_active": True}, limit=1
        )
        return pages[0] if pages else None

    async def capture_email(
        self,
        page: PrelandingRead,
        submission: EmailCaptureSubmit,
        client_ip: str | None = None,
        referer: str | None = None,
    ) -> EmailCaptureResult:
        """Store the email and tell the visitor where to go next.

        The explicit redirect wins over the page's own target URL.
        """
        country = await self.geo.country_for(client_ip, fallback=UNKNOWN_COUNTRY)
        await self.email_captures.create(
            {
                "email": str(submission.email),
                "page_key": page.page_key,
                "source": submission.source or referer,
                "country": country,
            }
        )
        logger.info("Email captured", page_key=page.page_key, country=country)
        return EmailCaptureResult(
            country=country,
            redirect_url=submission.redirect or page.target_url,
        )
