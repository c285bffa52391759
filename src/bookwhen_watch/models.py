"""
Data models for Bookwhen Watch.

Defines Pydantic models for the scraped calendar and its changes:
- Identifier
- Event
- ChangeSet
- SnapshotLoad
"""

from datetime import datetime
from enum import Enum
from hashlib import sha256
from typing import List, Optional

from pydantic import AliasChoices, BaseModel, Field

# Joins the display fields of a session into its fallback key
SYNTHESIZED_SEPARATOR = "||"

# Marks synthesized ids so they cannot clash with ids from the page
SYNTHESIZED_PREFIX = "syn-"


class EventStatus(str, Enum):
    """Bookability of a session, derived from its row icons."""
    AVAILABLE = "Available"
    FULL = "Full"
    UNKNOWN = "Unknown"


class IdKind(str, Enum):
    """Where an event identifier came from."""
    SOURCE = "source"
    SYNTHESIZED = "synthesized"


class Identifier(BaseModel):
    """
    Identity of a calendar session.

    Bookwhen rows usually carry a ``data-event`` attribute, which is used
    as-is. Rows without one get an identifier synthesized from a hash of
    their display fields. Those fields can be edited on the page, so a
    synthesized identifier changes whenever the title, day or time label
    does, and the edited session is then reported as a new one.
    """
    kind: IdKind
    value: str

    @classmethod
    def source_provided(cls, value: str) -> "Identifier":
        return cls(kind=IdKind.SOURCE, value=value)

    @classmethod
    def synthesized(
        cls,
        title: str,
        day_of_week: str,
        day_of_month: str,
        time: str,
    ) -> "Identifier":
        """Build a deterministic identifier from the session's display fields."""
        key = SYNTHESIZED_SEPARATOR.join([title, day_of_week, day_of_month, time])
        digest = sha256(key.encode("utf-8")).hexdigest()[:16]
        return cls(kind=IdKind.SYNTHESIZED, value=f"{SYNTHESIZED_PREFIX}{digest}")

    def __str__(self) -> str:
        return self.value


class Event(BaseModel):
    """
    One scheduled session on the calendar.

    Attributes:
        id: Stable identifier (see Identifier)
        id_kind: Whether the id came from the page or was synthesized
        title: Session name
        day_of_week: Display day name (e.g. "Wed")
        day_of_month: Display day number (e.g. "5")
        time: Display time label (e.g. "5pm GMT")
        status: Available, Full or Unknown
    """
    id: str
    id_kind: IdKind = IdKind.SOURCE
    title: str = ""
    day_of_week: str = Field(
        default="",
        validation_alias=AliasChoices("day_of_week", "dow"),
    )
    day_of_month: str = Field(
        default="",
        validation_alias=AliasChoices("day_of_month", "day"),
    )
    time: str = ""
    status: EventStatus = EventStatus.UNKNOWN

    @property
    def identifier(self) -> Identifier:
        return Identifier(kind=self.id_kind, value=self.id)

    @property
    def summary_line(self) -> str:
        """One-line description used in notifications and logs."""
        return f"{self.title} — {self.time}"


class ChangeSet(BaseModel):
    """Result of comparing two snapshots."""
    added: List[Event] = Field(default_factory=list)
    reopened: List[Event] = Field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.reopened)

    @property
    def total(self) -> int:
        return len(self.added) + len(self.reopened)


class SnapshotLoadStatus(str, Enum):
    """Outcome of reading the previous snapshot."""
    LOADED = "loaded"
    NOT_FOUND = "not_found"
    PARSE_ERROR = "parse_error"
    READ_ERROR = "read_error"


class SnapshotLoad(BaseModel):
    """
    Tagged result of a snapshot read.

    ``events`` is empty for every status except LOADED, so callers that do
    not care why a baseline is missing can use it directly.
    """
    status: SnapshotLoadStatus
    events: List[Event] = Field(default_factory=list)
    saved_at: Optional[datetime] = None
    detail: Optional[str] = None

    @classmethod
    def loaded(cls, events: List[Event], saved_at: Optional[datetime] = None) -> "SnapshotLoad":
        return cls(status=SnapshotLoadStatus.LOADED, events=events, saved_at=saved_at)

    @classmethod
    def not_found(cls, detail: Optional[str] = None) -> "SnapshotLoad":
        return cls(status=SnapshotLoadStatus.NOT_FOUND, detail=detail)

    @classmethod
    def parse_error(cls, detail: str) -> "SnapshotLoad":
        return cls(status=SnapshotLoadStatus.PARSE_ERROR, detail=detail)

    @classmethod
    def read_error(cls, detail: str) -> "SnapshotLoad":
        return cls(status=SnapshotLoadStatus.READ_ERROR, detail=detail)

    @property
    def is_corrupt(self) -> bool:
        """True when a baseline exists but could not be used."""
        return self.status in (SnapshotLoadStatus.PARSE_ERROR, SnapshotLoadStatus.READ_ERROR)
