"""
Snapshot stores.

Keeps the events seen by the last successful run so the next run has
a baseline to compare against. Two backends share one JSON envelope:

    {"version": 1, "saved_at": "...", "source_url": "...", "events": [...]}

A bare JSON list of events, as written by earlier versions of the
watcher, is also accepted on read.
"""

import json
import logging
import os
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, List, Optional, Sequence

from dateutil.parser import isoparse
from pydantic import TypeAdapter, ValidationError
from supabase import Client

from bookwhen_watch.config import Settings, get_settings
from bookwhen_watch.db.client import connect_supabase
from bookwhen_watch.errors import SnapshotError
from bookwhen_watch.models import Event, SnapshotLoad

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1

_events_adapter = TypeAdapter(List[Event])


class SnapshotStore(ABC):
    """
    Loads and saves the previous run's events.

    ``load`` never raises: a missing or unusable snapshot is reported
    through the status of the returned SnapshotLoad. ``save`` replaces
    whatever was stored and raises SnapshotError on failure.
    """

    def __init__(self, source_url: Optional[str] = None):
        self.source_url = source_url

    @abstractmethod
    def load(self) -> SnapshotLoad:
        """Read the previous snapshot."""
        pass

    @abstractmethod
    def save(self, events: Sequence[Event]) -> None:
        """Replace the stored snapshot with events."""
        pass

    def encode(self, events: Sequence[Event]) -> dict:
        """Wrap events in the snapshot envelope."""
        return {
            "version": SNAPSHOT_VERSION,
            "saved_at": datetime.now(timezone.utc).isoformat(),
            "source_url": self.source_url,
            "events": [event.model_dump(mode="json") for event in events],
        }

    def decode(self, payload: Any) -> SnapshotLoad:
        """
        Turn a decoded JSON payload into a SnapshotLoad.

        Args:
            payload: Envelope dict or legacy list of events

        Returns:
            SnapshotLoad: LOADED, or PARSE_ERROR if the payload has the wrong shape
        """
        saved_at = None

        if isinstance(payload, list):
            raw_events = payload
        elif isinstance(payload, dict) and isinstance(payload.get("events"), list):
            raw_events = payload["events"]
            saved_at = self._parse_saved_at(payload.get("saved_at"))
        else:
            return SnapshotLoad.parse_error(
                f"Unexpected snapshot structure: {type(payload).__name__}"
            )

        try:
            events = _events_adapter.validate_python(raw_events)
        except ValidationError as e:
            return SnapshotLoad.parse_error(
                f"Invalid event in snapshot: {e.error_count()} validation error(s)"
            )

        return SnapshotLoad.loaded(events, saved_at=saved_at)

    @staticmethod
    def _parse_saved_at(value: Any) -> Optional[datetime]:
        """Parse the saved_at timestamp, ignoring a malformed one."""
        if not value:
            return None
        try:
            return isoparse(value)
        except (ValueError, TypeError) as e:
            logger.debug(f"Could not parse snapshot timestamp '{value}': {e}")
            return None


class FileSnapshotStore(SnapshotStore):
    """Snapshot kept in a local JSON file."""

    def __init__(
        self,
        path: Optional[Path] = None,
        source_url: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the file store.

        Args:
            path: Snapshot file, defaults to SNAPSHOT_PATH
            source_url: Calendar URL recorded alongside the events
            settings: Optional settings instance, will use default if not provided
        """
        if path is None:
            settings = settings or get_settings()
            path = settings.snapshot_path
            source_url = source_url or settings.calendar_url

        super().__init__(source_url=source_url)
        self.path = Path(path)

    def load(self) -> SnapshotLoad:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return SnapshotLoad.not_found(f"{self.path} does not exist")
        except UnicodeDecodeError as e:
            return SnapshotLoad.parse_error(f"{self.path} is not valid UTF-8: {e}")
        except OSError as e:
            return SnapshotLoad.read_error(f"Could not read {self.path}: {e}")

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as e:
            return SnapshotLoad.parse_error(f"{self.path} is not valid JSON: {e}")
        except RecursionError:
            return SnapshotLoad.parse_error(f"{self.path} is nested too deeply to decode")

        return self.decode(payload)

    def save(self, events: Sequence[Event]) -> None:
        """
        Write events to the snapshot file.

        The content goes to a temporary sibling file first and is then
        renamed over the snapshot, so readers never see a partial write.

        Raises:
            SnapshotError: If the file cannot be written
        """
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        content = json.dumps(self.encode(events), indent=2, ensure_ascii=False)

        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(content, encoding="utf-8")
            os.replace(tmp_path, self.path)
        except OSError as e:
            try:
                tmp_path.unlink(missing_ok=True)
            except OSError as cleanup_error:
                logger.warning(f"Could not remove {tmp_path}: {cleanup_error}")
            raise SnapshotError(f"Could not write snapshot to {self.path}: {e}") from e

        logger.debug(f"Saved {len(events)} events to {self.path}")


# Table name in Supabase
TABLE_NAME = "calendar_snapshots"


class SupabaseSnapshotStore(SnapshotStore):
    """
    Snapshot kept as one row of a Supabase table.

    Each watched calendar uses its own row, selected by snapshot_key,
    so several watchers can share a table.
    """

    def __init__(
        self,
        client: Optional[Client] = None,
        key: Optional[str] = None,
        source_url: Optional[str] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the Supabase store.

        Args:
            client: Optional Supabase client, will use default if not provided
            key: Row key, defaults to SNAPSHOT_KEY
            source_url: Calendar URL recorded alongside the events
            settings: Optional settings instance, will use default if not provided
        """
        if key is None:
            settings = settings or get_settings()
            key = settings.snapshot_key
            source_url = source_url or settings.calendar_url

        if client is None:
            client = connect_supabase(settings or get_settings())

        super().__init__(source_url=source_url)
        self.key = key
        self.client = client
        self.table = self.client.table(TABLE_NAME)

    def load(self) -> SnapshotLoad:
        try:
            result = (
                self.table
                .select("payload")
                .eq("snapshot_key", self.key)
                .limit(1)
                .execute()
            )
        except Exception as e:
            logger.error(f"Error reading snapshot '{self.key}': {e}")
            return SnapshotLoad.read_error(f"Could not read snapshot '{self.key}': {e}")

        if not result.data:
            return SnapshotLoad.not_found(f"No snapshot row for key '{self.key}'")

        return self.decode(result.data[0].get("payload"))

    def save(self, events: Sequence[Event]) -> None:
        """
        Upsert the snapshot row.

        Raises:
            SnapshotError: If the row cannot be written
        """
        payload = self.encode(events)
        record = {
            "snapshot_key": self.key,
            "payload": payload,
            "saved_at": payload["saved_at"],
        }

        try:
            self.table.upsert(record, on_conflict="snapshot_key").execute()
        except Exception as e:
            raise SnapshotError(f"Could not save snapshot '{self.key}': {e}") from e

        logger.debug(f"Saved {len(events)} events to snapshot '{self.key}'")


# SQL for creating the Supabase table (run this in Supabase SQL Editor)
CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS calendar_snapshots (
    id BIGSERIAL PRIMARY KEY,
    snapshot_key TEXT NOT NULL UNIQUE,
    payload JSONB NOT NULL,
    saved_at TIMESTAMPTZ DEFAULT NOW()
);

-- Enable Row Level Security (optional but recommended)
ALTER TABLE calendar_snapshots ENABLE ROW LEVEL SECURITY;

-- Create policy for service role (full access)
CREATE POLICY "Service role has full access" ON calendar_snapshots
    FOR ALL
    USING (true)
    WITH CHECK (true);
"""
