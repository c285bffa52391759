"""
Exception hierarchy for Bookwhen Watch.

Collaborators translate library errors into these types at the boundary
so the monitor only has to reason about one family of failures.
"""


class WatchError(Exception):
    """Base exception for all monitor errors."""
    pass


class FetchError(WatchError):
    """Raised when the calendar page cannot be fetched."""
    pass


class SnapshotError(WatchError):
    """Raised when the snapshot cannot be saved, or a corrupt baseline is rejected."""
    pass


class NotificationError(WatchError):
    """Raised when a change notification cannot be delivered."""
    pass
