"""Shared fixtures for Bookwhen Watch tests."""

from __future__ import annotations

from typing import List, Optional

import pytest

from bookwhen_watch.config import Settings
from bookwhen_watch.models import Event, EventStatus

AGENDA_HTML = """
<html>
<body>
<table class="agenda">
  <tr data-hook="agenda_list_item" data-event="ev-1001">
    <td class="date"><span class="dow">Wed</span> <span class="dom">5</span></td>
    <td><span class="time_span">5pm GMT</span></td>
    <td class="summary"><button>Beginners Salsa</button></td>
    <td class="edit_icon"><span class="basket"></span></td>
  </tr>
  <tr data-hook="agenda_list_item" data-event="ev-1002">
    <td class="date"><span class="dow">Thu</span> <span class="dom">6</span></td>
    <td><span class="time_span">7pm GMT</span></td>
    <td class="summary"><button>Improvers   Bachata</button></td>
    <td class="edit_icon"><span class="sold_out"></span></td>
  </tr>
  <tr data-hook="agenda_list_item">
    <td class="date"><span class="dow">Fri</span> <span class="dom">7</span></td>
    <td><span class="time_span">6pm GMT</span></td>
    <td class="summary"><button>Open Practice</button></td>
    <td class="edit_icon"></td>
  </tr>
</table>
</body>
</html>
"""


@pytest.fixture
def agenda_html() -> str:
    return AGENDA_HTML


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        _env_file=None,
        calendar_url="https://bookwhen.com/example",
        snapshot_path=tmp_path / "snapshot.json",
        notifier="log",
    )


def make_event(
    id: str,
    status: EventStatus = EventStatus.UNKNOWN,
    title: Optional[str] = None,
    time: str = "5pm GMT",
) -> Event:
    return Event(
        id=id,
        title=title if title is not None else f"Class {id}",
        day_of_week="Wed",
        day_of_month="5",
        time=time,
        status=status,
    )


def ids(events: List[Event]) -> List[str]:
    return [event.id for event in events]
