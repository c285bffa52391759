"""Tests for bookwhen_watch.scrapers.agenda — extracting events from agenda pages."""

from __future__ import annotations

from bookwhen_watch.models import Event, EventStatus, IdKind, Identifier
from bookwhen_watch.scrapers import AgendaScraper, find_duplicate_ids

from conftest import ids, make_event


def _row(attrs: str = "", icons: str = "", body: str | None = None) -> str:
    if body is None:
        body = (
            '<span class="dow">Mon</span><span class="dom">3</span>'
            '<span class="time_span">6pm</span>'
            '<div class="summary"><button>Yoga</button></div>'
        )
    return (
        f'<tr data-hook="agenda_list_item" {attrs}><td>{body}'
        f'<div class="edit_icon">{icons}</div></td></tr>'
    )


def _page(*rows: str) -> str:
    return f"<html><body><table>{''.join(rows)}</table></body></html>"


class TestScrape:
    """AgendaScraper.scrape — rows to events."""

    def test_one_event_per_row_in_source_order(self, agenda_html: str) -> None:
        events = AgendaScraper().scrape(agenda_html)
        assert len(events) == 3
        assert [e.title for e in events] == [
            "Beginners Salsa",
            "Improvers Bachata",
            "Open Practice",
        ]

    def test_reads_fields(self, agenda_html: str) -> None:
        first = AgendaScraper().scrape(agenda_html)[0]
        assert first.id == "ev-1001"
        assert first.id_kind == IdKind.SOURCE
        assert first.day_of_week == "Wed"
        assert first.day_of_month == "5"
        assert first.time == "5pm GMT"

    def test_statuses(self, agenda_html: str) -> None:
        events = AgendaScraper().scrape(agenda_html)
        assert [e.status for e in events] == [
            EventStatus.AVAILABLE,
            EventStatus.FULL,
            EventStatus.UNKNOWN,
        ]

    def test_missing_id_is_synthesized(self, agenda_html: str) -> None:
        last = AgendaScraper().scrape(agenda_html)[2]
        expected = Identifier.synthesized("Open Practice", "Fri", "7", "6pm GMT")
        assert last.id_kind == IdKind.SYNTHESIZED
        assert last.id == expected.value

    def test_empty_id_attribute_is_synthesized(self) -> None:
        (event,) = AgendaScraper().scrape(_page(_row('data-event=""')))
        assert event.id_kind == IdKind.SYNTHESIZED
        assert event.id.startswith("syn-")

    def test_ids_are_deterministic(self, agenda_html: str) -> None:
        scraper = AgendaScraper()
        assert ids(scraper.scrape(agenda_html)) == ids(scraper.scrape(agenda_html))

    def test_no_rows(self) -> None:
        assert AgendaScraper().scrape("<html><body><p>No classes</p></body></html>") == []

    def test_ignores_other_rows(self) -> None:
        html = _page('<tr data-hook="header"><td>Date</td></tr>', _row('data-event="x"'))
        assert ids(AgendaScraper().scrape(html)) == ["x"]

    def test_missing_fields_become_empty_strings(self) -> None:
        (event,) = AgendaScraper().scrape(_page(_row('data-event="x"', body="")))
        assert event.title == ""
        assert event.day_of_week == ""
        assert event.day_of_month == ""
        assert event.time == ""
        assert event.status == EventStatus.UNKNOWN

    def test_first_match_wins(self) -> None:
        body = (
            '<span class="time_span">10am</span><span class="time_span">11am</span>'
        )
        (event,) = AgendaScraper().scrape(_page(_row('data-event="x"', body=body)))
        assert event.time == "10am"

    def test_duplicate_rows_are_kept(self) -> None:
        html = _page(_row('data-event="x"'), _row('data-event="x"'))
        assert ids(AgendaScraper().scrape(html)) == ["x", "x"]


class TestStatusClassification:
    """Status comes from the basket and sold-out icons."""

    def test_basket_wins_over_sold_out(self) -> None:
        icons = '<span class="sold_out"></span><span class="basket"></span>'
        (event,) = AgendaScraper().scrape(_page(_row('data-event="x"', icons)))
        assert event.status == EventStatus.AVAILABLE

    def test_sold_out_only(self) -> None:
        (event,) = AgendaScraper().scrape(
            _page(_row('data-event="x"', '<span class="sold_out"></span>'))
        )
        assert event.status == EventStatus.FULL

    def test_neither_marker(self) -> None:
        (event,) = AgendaScraper().scrape(_page(_row('data-event="x"')))
        assert event.status == EventStatus.UNKNOWN

    def test_icon_outside_edit_icon_is_ignored(self) -> None:
        body = '<span class="basket"></span>'
        (event,) = AgendaScraper().scrape(_page(_row('data-event="x"', body=body)))
        assert event.status == EventStatus.UNKNOWN


class TestFindDuplicateIds:
    """find_duplicate_ids — ids seen more than once."""

    def test_none(self) -> None:
        assert find_duplicate_ids([make_event("a"), make_event("b")]) == []

    def test_first_seen_order(self) -> None:
        events = [make_event(i) for i in ["b", "a", "b", "c", "a", "a"]]
        assert find_duplicate_ids(events) == ["b", "a"]

    def test_empty(self) -> None:
        events: list[Event] = []
        assert find_duplicate_ids(events) == []
