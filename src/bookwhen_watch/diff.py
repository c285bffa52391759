"""
Snapshot comparison.

Classifies the events of the current run against the previous snapshot:
- added: the identifier was not in the previous snapshot
- reopened: the session was unavailable before and is bookable now

Sessions that disappeared, or whose status changed in any other way,
are not reported.
"""

from typing import Dict, Iterable, List, Sequence, Union

from bookwhen_watch.models import ChangeSet, Event, EventStatus

# Status vocabularies, matched case-insensitively as substrings
UNAVAILABLE_TERMS = ("full", "sold out", "waitlist", "no spaces")
BOOKABLE_TERMS = ("available", "book", "spaces", "join")


def _status_text(status: Union[EventStatus, str]) -> str:
    if isinstance(status, EventStatus):
        return status.value.lower()
    return str(status).lower()


def _matches(status: Union[EventStatus, str], terms: Iterable[str]) -> bool:
    text = _status_text(status)
    return any(term in text for term in terms)


def was_unavailable(status: Union[EventStatus, str]) -> bool:
    """True if the status reads as full, sold out, waitlisted or without spaces."""
    return _matches(status, UNAVAILABLE_TERMS)


def is_bookable(status: Union[EventStatus, str]) -> bool:
    """True if the status reads as available, bookable, joinable or with spaces."""
    return _matches(status, BOOKABLE_TERMS)


def diff_events(previous: Sequence[Event], current: Sequence[Event]) -> ChangeSet:
    """
    Compare the previous snapshot with the current events.

    Identity is the event id alone. If the previous snapshot holds the
    same id more than once, the last occurrence is the one compared.

    Args:
        previous: Events from the last successful run
        current: Events extracted in this run

    Returns:
        ChangeSet: added and reopened events, in current order
    """
    previous_by_id: Dict[str, Event] = {event.id: event for event in previous}

    added: List[Event] = []
    reopened: List[Event] = []

    for event in current:
        old = previous_by_id.get(event.id)
        if old is None:
            added.append(event)
        elif was_unavailable(old.status) and is_bookable(event.status):
            reopened.append(event)

    return ChangeSet(added=added, reopened=reopened)
