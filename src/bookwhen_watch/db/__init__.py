"""Snapshot persistence for Bookwhen Watch - JSON file or Supabase."""

from bookwhen_watch.db.client import connect_supabase
from bookwhen_watch.db.snapshot_store import (
    FileSnapshotStore,
    SnapshotStore,
    SupabaseSnapshotStore,
)

__all__ = [
    "connect_supabase",
    "FileSnapshotStore",
    "SnapshotStore",
    "SupabaseSnapshotStore",
]
