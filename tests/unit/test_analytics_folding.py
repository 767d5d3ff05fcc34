"""Tests for folding tenant tracking rows into sessions."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from src.funnelhub.services.analytics.folding import (
    SiteRef,
    fold_email_submissions,
    fold_event_log,
    fold_link_tracking,
    fold_session_summary,
    fold_session_tables,
    format_time_spent,
    parse_timestamp,
)

pytestmark = pytest.mark.unit

SITE = SiteRef(slug="topic-mingle", name="Topic Mingle")
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def _at(minute: int) -> str:
    return f"2025-06-01T10:{minute:02d}:00Z"


def _by_id(snapshot, session_id):
    return next(s for s in snapshot.sessions if s.session_id == session_id)


class TestParseTimestamp:
    def test_zulu_suffix(self):
        assert parse_timestamp("2025-06-01T10:00:00Z") == datetime(2025, 6, 1, 10, tzinfo=UTC)

    def test_offset_converted_to_utc(self):
        parsed = parse_timestamp("2025-06-01T12:00:00+02:00")
        assert parsed == datetime(2025, 6, 1, 10, tzinfo=UTC)
        assert parsed.tzinfo == UTC

    def test_naive_assumed_utc(self):
        assert parse_timestamp(datetime(2025, 1, 1)) == datetime(2025, 1, 1, tzinfo=UTC)

    def test_aware_datetime_normalised(self):
        value = datetime(2025, 1, 1, 5, tzinfo=timezone(timedelta(hours=5)))
        assert parse_timestamp(value) == datetime(2025, 1, 1, tzinfo=UTC)

    @pytest.mark.parametrize("value", [None, "", "yesterday", 12345])
    def test_unparseable(self, value):
        assert parse_timestamp(value) is None


class TestFormatTimeSpent:
    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [(None, "0s"), (0, "0s"), (-5, "0s"), ("abc", "0s"), (59, "0m 59s"), (125, "2m 5s"), ("61", "1m 1s")],
    )
    def test_format(self, seconds, expected):
        assert format_time_spent(seconds) == expected


class TestEventLog:
    @pytest.fixture
    def snapshot(self):
        events = [
            {"session_id": "s1", "ip_address": "1.1.1.1", "country": "US",
             "event_type": "page_view", "page_url": "/blog/a", "timestamp": _at(0)},
            {"session_id": "s1", "event_type": "page_view", "page_url": "/blog/a",
             "related_search_id": "rs1", "timestamp": _at(1)},
            {"session_id": "s1", "event_type": "button_click", "button_id": "related-search-rs1",
             "related_search_id": "rs1", "button_label": "shoes label", "timestamp": _at(2)},
            {"session_id": "s1", "event_type": "button_click", "button_id": "visit-now-9",
             "button_label": "Shoes", "timestamp": _at(3)},
            {"session_id": "s1", "event_type": "click", "button_id": "blog-card-b1",
             "blog_id": "b1", "timestamp": _at(4)},
            {"session_id": "s1", "event_type": "click", "button_id": "cta",
             "button_label": "Subscribe", "timestamp": _at(5)},
            {"session_id": None, "ip_address": "2.2.2.2", "event_type": "page_view",
             "url": "/home", "timestamp": _at(6)},
        ]
        return fold_event_log(
            events, SITE, search_names={"rs1": "Shoes"}, blog_names={"b1": "Guide"}, now=NOW
        )

    def test_stats(self, snapshot):
        stats = snapshot.stats
        assert (stats.sessions, stats.page_views, stats.unique_pages) == (2, 3, 2)
        assert (stats.total_clicks, stats.unique_clicks) == (4, 4)

    def test_session_counts(self, snapshot):
        s1 = _by_id(snapshot, "s1")
        assert s1.page_views == 2
        assert s1.unique_pages == 1
        assert s1.total_clicks == 4
        assert s1.unique_clicks == 4
        assert s1.country == "US"
        assert s1.timestamp == datetime(2025, 6, 1, 10, 5, tzinfo=UTC)

    def test_breakdowns(self, snapshot):
        s1 = _by_id(snapshot, "s1")
        [term] = s1.search_results
        assert term.term == "Shoes"
        assert (term.views, term.total_clicks, term.unique_clicks) == (1, 1, 1)
        assert (term.visit_now_clicks, term.visit_now_unique) == (1, 1)
        assert [(b.title, b.total_clicks) for b in s1.blog_clicks] == [("Guide", 1)]
        assert [(b.button, b.total) for b in s1.button_interactions] == [("Subscribe", 1)]

    def test_anonymous_session_defaults(self, snapshot):
        anon = _by_id(snapshot, "anon-2.2.2.2")
        assert anon.device == "Desktop • Chrome"
        assert anon.country == "Unknown"
        assert anon.page_views == 1

    def test_click_without_label_or_id_has_no_button(self):
        snapshot = fold_event_log(
            [{"session_id": "s", "event_type": "click", "timestamp": _at(0)}], SITE, now=NOW
        )
        [session] = snapshot.sessions
        assert session.total_clicks == 1
        assert session.button_interactions == []
        assert session.ip_address == "N/A"

    def test_unknown_label_falls_back_to_button_id(self):
        events = [
            {"session_id": "s", "event_type": "click", "button_id": "cta-hero",
             "button_label": "Unknown", "timestamp": _at(0)},
            {"session_id": "s", "event_type": "click", "button_id": "Unknown-button",
             "timestamp": _at(1)},
            {"session_id": "s", "event_type": "click", "button_id": "Unknown-button",
             "button_label": "Unknown", "timestamp": _at(2)},
        ]
        [session] = fold_event_log(events, SITE, now=NOW).sessions
        assert session.total_clicks == 3
        assert [(b.button, b.total) for b in session.button_interactions] == [("cta-hero", 1)]

    def test_empty(self):
        snapshot = fold_event_log([], SITE, now=NOW)
        assert snapshot.sessions == []
        assert snapshot.stats.sessions == 0


class TestSessionSummary:
    def test_arrays_and_camel_case_keys(self):
        row = {
            "session_id": "sp1",
            "time_spent": 125,
            "timestamp": _at(0),
            "page_views": 3,
            "page_urls": ["/a", "/b"],
            "clicks": 2,
            "button_ids": ["x"],
            "search_results": [{"term": "Shoes", "views": 2, "totalClicks": 1, "uniqueClicks": 1}],
            "button_interactions": [{"button": "cta", "total": 2, "unique": 1}],
        }
        snapshot = fold_session_summary([row], SITE, now=NOW)

        [session] = snapshot.sessions
        assert session.device == "Mobile • Safari"
        assert session.time_spent == "2m 5s"
        assert (session.unique_pages, session.unique_clicks) == (2, 1)
        assert session.search_results[0].total_clicks == 1
        assert session.button_interactions[0].button == "cta"

    def test_snake_case_breakdown_keys(self):
        row = {
            "session_id": "sp1",
            "search_results": [{"term": "Shoes", "total_clicks": 3, "unique_clicks": 2}],
        }
        [session] = fold_session_summary([row], SITE, now=NOW).sessions
        assert (session.search_results[0].total_clicks, session.search_results[0].unique_clicks) == (3, 2)

    def test_scalar_columns_fallback(self):
        row = {
            "id": 7,
            "page_views": 1,
            "related_searches": 4,
            "result_clicks": 2,
            "unique_clicks": 1,
            "unique_result_clicks": 1,
            "created_at": _at(3),
        }
        [session] = fold_session_summary([row], SITE, now=NOW).sessions

        assert session.session_id == "sp-7"
        assert session.timestamp == datetime(2025, 6, 1, 10, 3, tzinfo=UTC)
        [result] = session.search_results
        assert (result.term, result.views, result.total_clicks) == ("results", 4, 2)
        [button] = session.button_interactions
        assert (button.button, button.total, button.unique) == ("result-click", 2, 1)

    def test_stats_prefer_global_sets(self):
        rows = [
            {"session_id": "a", "page_views": 2, "page_urls": ["/a", "/b"], "button_ids": ["x"], "clicks": 1},
            {"session_id": "b", "page_views": 1, "page_urls": ["/a"], "button_ids": ["x"], "clicks": 1},
        ]
        stats = fold_session_summary(rows, SITE, now=NOW).stats
        assert stats.unique_pages == 2
        assert stats.unique_clicks == 1
        assert stats.page_views == 3

    def test_stats_fall_back_to_sums(self):
        rows = [
            {"session_id": "a", "unique_pages": 2, "unique_clicks": 1},
            {"session_id": "b", "unique_pages": 3, "unique_clicks": 2},
        ]
        stats = fold_session_summary(rows, SITE, now=NOW).stats
        assert (stats.unique_pages, stats.unique_clicks) == (5, 3)


class TestEmailSubmissions:
    def test_one_view_and_click_per_session(self):
        rows = [
            {"id": 1, "session_id": "e1", "ip_address": "3.3.3.3", "related_search_id": "rs1", "timestamp": _at(0)},
            {"id": 2, "session_id": "e1", "related_search_id": "rs2", "timestamp": _at(5)},
            {"id": 3},
        ]
        snapshot = fold_email_submissions(rows, SITE, now=NOW)

        e1 = _by_id(snapshot, "e1")
        assert (e1.page_views, e1.total_clicks) == (1, 1)
        assert (e1.unique_pages, e1.unique_clicks) == (2, 2)
        assert e1.timestamp == datetime(2025, 6, 1, 10, 5, tzinfo=UTC)

        anon = _by_id(snapshot, "ts-3")
        assert anon.ip_address == "N/A"
        assert anon.timestamp == NOW

        stats = snapshot.stats
        assert (stats.sessions, stats.page_views, stats.unique_pages) == (2, 2, 3)
        assert (stats.total_clicks, stats.unique_clicks) == (2, 3)


class TestSessionTables:
    @pytest.fixture
    def snapshot(self):
        sessions = [
            {"session_id": "a", "user_agent": "Mozilla/5.0 (iPhone) Mobile Safari",
             "ip_address": "4.4.4.4", "country": "DE", "timestamp": _at(0)},
            {"session_id": "b", "user_agent": "Mozilla/5.0 (X11; Linux)", "timestamp": _at(1)},
            {"session_id": None},
        ]
        page_views = [
            {"id": 1, "session_id": "a", "page_url": "/x"},
            {"id": 2, "session_id": "a", "page_url": "/x"},
            {"id": 3, "session_id": "a", "path": "/y"},
            {"id": 4, "session_id": "zzz", "page_url": "/ghost"},
        ]
        clicks = [
            {"id": 1, "session_id": "a", "button_id": "related-search-1", "button_label": "Shoes"},
            {"id": 2, "session_id": "a", "button_id": "visit-now-1", "button_label": "Shoes"},
            {"id": 3, "session_id": "b", "button_id": "blog-card-3", "button_label": "Guide"},
            {"id": 9, "session_id": "b"},
            {"id": 10, "session_id": "zzz", "button_id": "cta"},
            {"id": 11, "session_id": "b", "button_id": "cta", "button_label": "Unknown"},
        ]
        return fold_session_tables(sessions, page_views, clicks, SITE, now=NOW)

    def test_device_from_user_agent(self, snapshot):
        assert _by_id(snapshot, "a").device == "Mobile • Safari"
        assert _by_id(snapshot, "b").device == "Desktop • Firefox"

    def test_rows_for_unknown_sessions_ignored(self, snapshot):
        stats = snapshot.stats
        assert (stats.sessions, stats.page_views, stats.unique_pages) == (2, 3, 2)
        assert (stats.total_clicks, stats.unique_clicks) == (5, 5)

    def test_click_routing(self, snapshot):
        a = _by_id(snapshot, "a")
        [term] = a.search_results
        assert (term.term, term.total_clicks, term.visit_now_clicks) == ("Shoes", 1, 1)

        b = _by_id(snapshot, "b")
        assert [(c.title, c.total_clicks) for c in b.blog_clicks] == [("Guide", 1)]
        assert [(i.button, i.total) for i in b.button_interactions] == [("cta", 1)]


class TestLinkTracking:
    @pytest.fixture
    def snapshot(self):
        sessions = [
            {"session_id": "l1", "landing_page": "/lp", "device": "Mobile",
             "ip_address": "5.5.5.5", "timestamp": _at(0)},
            {"session_id": "l2", "timestamp": _at(1)},
        ]
        clicks = [
            {"id": 1, "session_id": "l1", "related_search_id": "rs1", "timestamp": _at(2)},
            {"id": 2, "session_id": "l1", "related_search_id": "rs1", "web_result_id": "wr1",
             "timestamp": _at(9)},
            {"id": 5, "session_id": "l2"},
            {"id": 6, "session_id": "missing", "web_result_id": "wr1"},
        ]
        return fold_link_tracking(
            sessions,
            clicks,
            SITE,
            search_names={"rs1": "Shoes"},
            result_names={"wr1": "Result A"},
            now=NOW,
        )

    def test_every_session_counts_one_view(self, snapshot):
        stats = snapshot.stats
        assert (stats.sessions, stats.page_views, stats.unique_pages) == (2, 2, 2)
        assert (stats.total_clicks, stats.unique_clicks) == (3, 3)

    def test_named_breakdowns(self, snapshot):
        l1 = _by_id(snapshot, "l1")
        [term] = l1.search_results
        assert (term.term, term.total_clicks, term.unique_clicks) == ("Shoes", 2, 1)
        assert [(b.button, b.total) for b in l1.button_interactions] == [("Result A", 1)]
        assert l1.timestamp == datetime(2025, 6, 1, 10, 9, tzinfo=UTC)

    def test_defaults(self, snapshot):
        l2 = _by_id(snapshot, "l2")
        assert l2.device == "Unknown"
        assert l2.ip_address == "N/A"
        assert l2.unique_clicks == 1
