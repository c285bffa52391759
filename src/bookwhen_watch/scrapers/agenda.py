"""
Agenda scraper for Bookwhen.

Extracts one Event per row of the Bookwhen agenda list view.

Row structure:
  tr[data-hook="agenda_list_item"][data-event="<id>"]
    .dow -> "Wed"
    .dom -> "5"
    .time_span -> "5pm GMT"
    .summary button -> session title
    .edit_icon .basket -> bookable (add to basket)
    .edit_icon .sold_out -> full
"""

import logging
from collections import Counter
from typing import List

from bs4 import Tag

from bookwhen_watch.models import Event, EventStatus, Identifier
from bookwhen_watch.scrapers.base import BaseScraper

logger = logging.getLogger(__name__)


class AgendaScraper(BaseScraper):
    """
    Turns a Bookwhen agenda page into Events, in page order.

    Every row is reported, including rows with missing fields or an
    Unknown status. Missing fields become empty strings.
    """

    ROW = "tr[data-hook='agenda_list_item']"
    ID_ATTRIBUTE = "data-event"
    DAY_OF_MONTH = ".dom"
    DAY_OF_WEEK = ".dow"
    TIME = ".time_span"
    TITLE = ".summary button"
    BASKET_ICON = ".edit_icon .basket"
    SOLD_OUT_ICON = ".edit_icon .sold_out"

    def scrape(self, html: str) -> List[Event]:
        """
        Extract all sessions from the page.

        Args:
            html: Raw agenda page content

        Returns:
            List[Event]: One event per agenda row, in source order
        """
        soup = self.parse_html(html)
        events = [self._parse_row(row) for row in soup.select(self.ROW)]
        logger.info(f"Extracted {len(events)} events from agenda")
        return events

    def _parse_row(self, row: Tag) -> Event:
        """Build an Event from a single agenda row."""
        title = self.select_text(row, self.TITLE)
        day_of_week = self.select_text(row, self.DAY_OF_WEEK)
        day_of_month = self.select_text(row, self.DAY_OF_MONTH)
        time = self.select_text(row, self.TIME)

        source_id = (row.get(self.ID_ATTRIBUTE) or "").strip()
        if source_id:
            identifier = Identifier.source_provided(source_id)
        else:
            identifier = Identifier.synthesized(title, day_of_week, day_of_month, time)
            logger.debug(f"Synthesized id {identifier} for '{title}'")

        return Event(
            id=identifier.value,
            id_kind=identifier.kind,
            title=title,
            day_of_week=day_of_week,
            day_of_month=day_of_month,
            time=time,
            status=self._classify_status(row),
        )

    def _classify_status(self, row: Tag) -> EventStatus:
        """
        Derive bookability from the row's icons.

        The basket icon is checked first, so a row showing both icons
        counts as Available.
        """
        if self.has_match(row, self.BASKET_ICON):
            return EventStatus.AVAILABLE
        if self.has_match(row, self.SOLD_OUT_ICON):
            return EventStatus.FULL
        return EventStatus.UNKNOWN


def find_duplicate_ids(events: List[Event]) -> List[str]:
    """
    Ids that occur more than once, in first-seen order.

    Args:
        events: Events from a single extraction pass

    Returns:
        List[str]: Duplicated ids
    """
    counts = Counter(event.id for event in events)
    seen = set()
    duplicates = []
    for event in events:
        if counts[event.id] > 1 and event.id not in seen:
            seen.add(event.id)
            duplicates.append(event.id)
    return duplicates
