"""Fold raw tenant tracking rows into sessions.

Each tenant tracks visitors in one of five schemas (see AnalyticsFlavor).
The functions here are pure: they take rows already renamed to canonical
fields by the tenant's schema profile and return a SiteSnapshot. Fetching
lives in sources.py.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from src.funnelhub.schemas.analytics import (
    BlogClickBreakdown,
    ButtonInteraction,
    SearchResultBreakdown,
    SessionDetail,
    SiteSnapshot,
    SiteStats,
)

Row = Mapping[str, Any]

RELATED_SEARCH_PREFIX = "related-search-"
VISIT_NOW_PREFIX = "visit-now-"
BLOG_CARD_PREFIX = "blog-card-"

UNKNOWN = "Unknown"
UNKNOWN_BUTTON = "Unknown-button"
NO_IP = "N/A"


@dataclass(frozen=True)
class SiteRef:
    slug: str
    name: str


def parse_timestamp(value: Any) -> datetime | None:
    """ISO string or datetime -> aware UTC datetime. Unparseable values give None."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value:
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def format_time_spent(seconds: Any) -> str:
    try:
        total = int(seconds or 0)
    except (TypeError, ValueError):
        total = 0
    if total <= 0:
        return "0s"
    return f"{total // 60}m {total % 60}s"


@dataclass
class _Tally:
    total: int = 0
    ips: set[str] = field(default_factory=set)

    def hit(self, ip: str) -> None:
        self.total += 1
        self.ips.add(ip)


@dataclass
class _TermTally:
    views: int = 0
    clicks: _Tally = field(default_factory=_Tally)
    visit_now: _Tally = field(default_factory=_Tally)


@dataclass
class SessionAccumulator:
    session_id: str
    device: str
    ip_address: str
    country: str
    timestamp: datetime
    time_spent: str = "0s"
    page_views: int = 0
    total_clicks: int = 0
    pages: set[str] = field(default_factory=set)
    click_keys: set[str] = field(default_factory=set)
    terms: dict[str, _TermTally] = field(default_factory=dict)
    blogs: dict[str, _Tally] = field(default_factory=dict)
    buttons: dict[str, _Tally] = field(default_factory=dict)

    def term(self, name: str) -> _TermTally:
        return self.terms.setdefault(name, _TermTally())

    def blog(self, title: str) -> _Tally:
        return self.blogs.setdefault(title, _Tally())

    def button(self, key: str) -> _Tally:
        return self.buttons.setdefault(key, _Tally())

    def touch(self, when: datetime | None) -> None:
        if when is not None and when > self.timestamp:
            self.timestamp = when

    def to_detail(self, site: SiteRef) -> SessionDetail:
        return SessionDetail(
            session_id=self.session_id,
            site_slug=site.slug,
            site_name=site.name,
            device=self.device,
            ip_address=self.ip_address,
            country=self.country,
            time_spent=self.time_spent,
            timestamp=self.timestamp,
            page_views=self.page_views,
            unique_pages=len(self.pages),
            total_clicks=self.total_clicks,
            unique_clicks=len(self.click_keys),
            search_results=[
                SearchResultBreakdown(
                    term=term,
                    views=t.views,
                    total_clicks=t.clicks.total,
                    unique_clicks=len(t.clicks.ips),
                    visit_now_clicks=t.visit_now.total,
                    visit_now_unique=len(t.visit_now.ips),
                )
                for term, t in self.terms.items()
            ],
            blog_clicks=[
                BlogClickBreakdown(title=title, total_clicks=t.total, unique_clicks=len(t.ips))
                for title, t in self.blogs.items()
            ],
            button_interactions=[
                ButtonInteraction(button=key, total=t.total, unique=len(t.ips))
                for key, t in self.buttons.items()
            ],
        )


def _text(row: Row, key: str) -> str | None:
    value = row.get(key)
    if value is None or value == "":
        return None
    return str(value)


def _build_snapshot(
    site: SiteRef,
    sessions: Iterable[SessionAccumulator],
    unique_pages: set[str],
    unique_clicks: set[str],
) -> SiteSnapshot:
    details = [s.to_detail(site) for s in sessions]
    return SiteSnapshot(
        site_slug=site.slug,
        site_name=site.name,
        stats=SiteStats(
            sessions=len(details),
            page_views=sum(d.page_views for d in details),
            unique_pages=len(unique_pages),
            total_clicks=sum(d.total_clicks for d in details),
            unique_clicks=len(unique_clicks),
        ),
        sessions=details,
    )


def _record_button_click(
    session: SessionAccumulator,
    button_id: str | None,
    label: str | None,
    term_name: str | None = None,
    blog_title: str | None = None,
) -> None:
    """Route one click into the search, visit-now, blog or generic breakdown."""
    ip = session.ip_address
    bid = button_id or ""
    assigned = False

    if term_name is not None and bid.startswith(RELATED_SEARCH_PREFIX):
        session.term(term_name).clicks.hit(ip)
        assigned = True
    if bid.startswith(VISIT_NOW_PREFIX):
        session.term(label or UNKNOWN).visit_now.hit(ip)
        assigned = True
    if blog_title is not None and bid.startswith(BLOG_CARD_PREFIX):
        session.blog(blog_title).hit(ip)
        assigned = True

    if not assigned and not bid.startswith(RELATED_SEARCH_PREFIX):
        key = button_key(button_id, label)
        if key:
            session.button(key).hit(ip)


def button_key(button_id: str | None, label: str | None) -> str | None:
    """Label, or the id when the label is missing or `Unknown`. None means skip."""
    key = button_id if label in (None, UNKNOWN) else label
    if not key or key == UNKNOWN_BUTTON:
        return None
    return key


def fold_event_log(
    events: Iterable[Row],
    site: SiteRef,
    search_names: Mapping[str, str] | None = None,
    blog_names: Mapping[str, str] | None = None,
    now: datetime | None = None,
) -> SiteSnapshot:
    """One analytics table of typed events, grouped by session."""
    search_names = search_names or {}
    blog_names = blog_names or {}
    now = now or datetime.now(UTC)
    sessions: dict[str, SessionAccumulator] = {}
    unique_pages: set[str] = set()
    unique_clicks: set[str] = set()

    for event in events:
        ip = _text(event, "ip_address")
        sid = _text(event, "session_id") or f"anon-{ip or 'unknown'}"
        when = parse_timestamp(event.get("timestamp"))
        session = sessions.get(sid)
        if session is None:
            session = sessions[sid] = SessionAccumulator(
                session_id=sid,
                device=_text(event, "device") or "Desktop • Chrome",
                ip_address=ip or NO_IP,
                country=_text(event, "country") or UNKNOWN,
                timestamp=when or now,
            )

        event_type = str(event.get("event_type") or "").lower()
        is_view = "page" in event_type or "view" in event_type
        is_click = "click" in event_type or "button" in event_type
        blog_id = _text(event, "blog_id")
        search_id = _text(event, "related_search_id")

        if is_view:
            session.page_views += 1
            page = (
                _text(event, "page_url")
                or _text(event, "url")
                or (f"blog-{blog_id}" if blog_id else None)
            )
            if page:
                session.pages.add(page)
                unique_pages.add(page)

        if is_click:
            session.total_clicks += 1
            click_key = (
                _text(event, "button_id")
                or search_id
                or (f"blog-{blog_id}" if blog_id else None)
                or f"click-{sid}-{session.total_clicks}"
            )
            session.click_keys.add(click_key)
            unique_clicks.add(click_key)

            label = _text(event, "button_label")
            _record_button_click(
                session,
                _text(event, "button_id"),
                label,
                term_name=(
                    search_names.get(search_id) or label or "Unknown Search" if search_id else None
                ),
                blog_title=(blog_names.get(blog_id) or label or "Unknown Blog" if blog_id else None),
            )

        if is_view and search_id:
            term = (
                search_names.get(search_id)
                or _text(event, "related_search_label")
                or "Unknown Search"
            )
            session.term(term).views += 1

        session.touch(when)

    return _build_snapshot(site, sessions.values(), unique_pages, unique_clicks)


def _count(row: Row, key: str) -> int:
    try:
        return int(row.get(key) or 0)
    except (TypeError, ValueError):
        return 0


def _distinct(row: Row, key: str) -> set[str] | None:
    values = row.get(key)
    if isinstance(values, list):
        return {str(v) for v in values}
    return None


def fold_session_summary(
    rows: Iterable[Row],
    site: SiteRef,
    now: datetime | None = None,
) -> SiteSnapshot:
    """One pre-aggregated row per session."""
    now = now or datetime.now(UTC)
    details: list[SessionDetail] = []
    global_pages: set[str] = set()
    global_clicks: set[str] = set()

    for row in rows:
        pages = _distinct(row, "page_urls")
        buttons = _distinct(row, "button_ids")
        if pages:
            global_pages |= pages
        if buttons:
            global_clicks |= buttons

        raw_results = row.get("search_results")
        if isinstance(raw_results, list):
            search_results = [
                SearchResultBreakdown(
                    term=str(sr.get("term") or UNKNOWN),
                    views=_count(sr, "views"),
                    total_clicks=_count(sr, "totalClicks") or _count(sr, "total_clicks"),
                    unique_clicks=_count(sr, "uniqueClicks") or _count(sr, "unique_clicks"),
                )
                for sr in raw_results
                if isinstance(sr, Mapping)
            ]
        else:
            search_results = [
                SearchResultBreakdown(
                    term="results",
                    views=_count(row, "related_searches"),
                    total_clicks=_count(row, "result_clicks"),
                    unique_clicks=_count(row, "unique_clicks"),
                )
            ]

        raw_buttons = row.get("button_interactions")
        if isinstance(raw_buttons, list):
            interactions = [
                ButtonInteraction(
                    button=str(bi.get("button") or UNKNOWN),
                    total=_count(bi, "total"),
                    unique=_count(bi, "unique"),
                )
                for bi in raw_buttons
                if isinstance(bi, Mapping)
            ]
        else:
            interactions = [
                ButtonInteraction(
                    button="result-click",
                    total=_count(row, "result_clicks"),
                    unique=_count(row, "unique_result_clicks"),
                )
            ]

        details.append(
            SessionDetail(
                session_id=_text(row, "session_id") or f"sp-{row.get('id', 'unknown')}",
                site_slug=site.slug,
                site_name=site.name,
                device=_text(row, "device") or "Mobile • Safari",
                ip_address=_text(row, "ip_address") or NO_IP,
                country=_text(row, "country") or UNKNOWN,
                time_spent=format_time_spent(row.get("time_spent")),
                timestamp=(
                    parse_timestamp(row.get("timestamp"))
                    or parse_timestamp(row.get("created_at"))
                    or now
                ),
                page_views=_count(row, "page_views"),
                unique_pages=(
                    _count(row, "unique_pages")
                    or (len(pages) if pages is not None else _count(row, "unique_pages_count"))
                ),
                total_clicks=_count(row, "clicks"),
                unique_clicks=(
                    _count(row, "unique_clicks")
                    or (len(buttons) if buttons is not None else _count(row, "unique_clicks_count"))
                ),
                search_results=search_results,
                button_interactions=interactions,
            )
        )

    return SiteSnapshot(
        site_slug=site.slug,
        site_name=site.name,
        stats=SiteStats(
            sessions=len(details),
            page_views=sum(d.page_views for d in details),
            unique_pages=len(global_pages) or sum(d.unique_pages for d in details),
            total_clicks=sum(d.total_clicks for d in details),
            unique_clicks=len(global_clicks) or sum(d.unique_clicks for d in details),
        ),
        sessions=details,
    )


def fold_email_submissions(
    rows: Iterable[Row],
    site: SiteRef,
    now: datetime | None = None,
) -> SiteSnapshot:
    """Email captures as sessions: one landing view and one submit click each."""
    now = now or datetime.now(UTC)
    sessions: dict[str, SessionAccumulator] = {}
    unique_pages: set[str] = set()
    unique_clicks: set[str] = set()

    for row in rows:
        ip = _text(row, "ip_address")
        sid = _text(row, "session_id") or ip or f"ts-{row.get('id')}"
        when = parse_timestamp(row.get("timestamp"))
        session = sessions.get(sid)
        if session is None:
            session = sessions[sid] = SessionAccumulator(
                session_id=sid,
                device=_text(row, "device") or "Desktop • Chrome",
                ip_address=ip or NO_IP,
                country=_text(row, "country") or UNKNOWN,
                timestamp=when or now,
                page_views=1,
                total_clicks=1,
            )

        page = f"pre-landing-{_text(row, 'related_search_id') or 'unknown'}"
        click = f"email-submit-{row.get('id')}"
        session.pages.add(page)
        session.click_keys.add(click)
        unique_pages.add(page)
        unique_clicks.add(click)
        session.touch(when)

    return _build_snapshot(site, sessions.values(), unique_pages, unique_clicks)


def fold_session_tables(
    sessions_rows: Iterable[Row],
    page_views: Iterable[Row],
    clicks: Iterable[Row],
    site: SiteRef,
    now: datetime | None = None,
) -> SiteSnapshot:
    """Separate sessions, page_views and clicks tables joined on session_id."""
    now = now or datetime.now(UTC)
    sessions: dict[str, SessionAccumulator] = {}
    unique_pages: set[str] = set()
    unique_clicks: set[str] = set()

    for row in sessions_rows:
        sid = _text(row, "session_id")
        if sid is None:
            continue
        user_agent = _text(row, "user_agent") or ""
        sessions[sid] = SessionAccumulator(
            session_id=sid,
            device=_text(row, "device")
            or ("Mobile • Safari" if "Mobile" in user_agent else "Desktop • Firefox"),
            ip_address=_text(row, "ip_address") or NO_IP,
            country=_text(row, "country") or UNKNOWN,
            timestamp=parse_timestamp(row.get("timestamp")) or now,
        )

    for pv in page_views:
        session = sessions.get(_text(pv, "session_id") or "")
        if session is None:
            continue
        session.page_views += 1
        page = _text(pv, "page_url") or _text(pv, "path") or f"pv-{pv.get('id')}"
        session.pages.add(page)
        unique_pages.add(page)

    for click in clicks:
        session = sessions.get(_text(click, "session_id") or "")
        if session is None:
            continue
        session.total_clicks += 1
        button_id = _text(click, "button_id")
        label = _text(click, "button_label")
        key = button_id or label or f"click-{click.get('id')}"
        session.click_keys.add(key)
        unique_clicks.add(key)

        bid = button_id or ""
        if bid.startswith(RELATED_SEARCH_PREFIX):
            session.term(label or UNKNOWN).clicks.hit(session.ip_address)
        elif bid.startswith(VISIT_NOW_PREFIX):
            session.term(label or UNKNOWN).visit_now.hit(session.ip_address)
        elif bid.startswith(BLOG_CARD_PREFIX):
            session.blog(label or UNKNOWN).hit(session.ip_address)
        elif button := button_key(button_id, label):
            session.button(button).hit(session.ip_address)

    return _build_snapshot(site, sessions.values(), unique_pages, unique_clicks)


def fold_link_tracking(
    sessions_rows: Iterable[Row],
    clicks: Iterable[Row],
    site: SiteRef,
    search_names: Mapping[str, str] | None = None,
    result_names: Mapping[str, str] | None = None,
    now: datetime | None = None,
) -> SiteSnapshot:
    """Sessions plus a link click table; every session counts one page view."""
    search_names = search_names or {}
    result_names = result_names or {}
    now = now or datetime.now(UTC)
    sessions: dict[str, SessionAccumulator] = {}
    unique_pages: set[str] = set()
    unique_clicks: set[str] = set()

    for row in sessions_rows:
        sid = _text(row, "session_id")
        if sid is None:
            continue
        page = _text(row, "page_url") or _text(row, "landing_page") or "/"
        session = sessions[sid] = SessionAccumulator(
            session_id=sid,
            device=_text(row, "device") or UNKNOWN,
            ip_address=_text(row, "ip_address") or NO_IP,
            country=_text(row, "country") or UNKNOWN,
            timestamp=parse_timestamp(row.get("timestamp")) or now,
            page_views=1,
        )
        session.pages.add(page)
        unique_pages.add(page)

    for click in clicks:
        session = sessions.get(_text(click, "session_id") or "")
        if session is None:
            continue
        session.total_clicks += 1
        search_id = _text(click, "related_search_id")
        result_id = _text(click, "web_result_id")

        if search_id:
            session.term(search_names.get(search_id) or "Unknown Search").clicks.hit(
                session.ip_address
            )
        if result_id:
            session.button(result_names.get(result_id) or "Unknown Result").hit(session.ip_address)

        if result_id:
            key = f"web-result-{result_id}"
        elif search_id:
            key = f"related-search-{search_id}"
        else:
            key = f"click-{click.get('id')}"
        session.click_keys.add(key)
        unique_clicks.add(key)
        session.touch(parse_timestamp(click.get("timestamp")))

    return _build_snapshot(site, sessions.values(), unique_pages, unique_clicks)
