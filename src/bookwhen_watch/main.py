"""
Main orchestrator for Bookwhen Watch.

Runs one check of the calendar:
1. Fetch the agenda page
2. Extract events
3. Load the previous snapshot
4. Diff previous against current
5. Notify if classes were added or reopened
6. Save the current events as the new snapshot

Any failure before step 6 leaves the previous snapshot untouched, so the
next run compares against the last good baseline.
"""

import logging
import sys
from typing import Optional

from bookwhen_watch.config import Settings, get_settings, setup_logging
from bookwhen_watch.db import FileSnapshotStore, SnapshotStore, SupabaseSnapshotStore
from bookwhen_watch.diff import diff_events
from bookwhen_watch.errors import SnapshotError
from bookwhen_watch.models import ChangeSet, IdKind, SnapshotLoad, SnapshotLoadStatus
from bookwhen_watch.notify import (
    ChangeFormatter,
    ChangeNotifier,
    EmailNotifier,
    LogNotifier,
    TelegramNotifier,
)
from bookwhen_watch.scrapers import AgendaScraper, find_duplicate_ids
from bookwhen_watch.source import ContentFetcher, PageFetcher

logger = logging.getLogger(__name__)


class CalendarMonitor:
    """
    Main orchestrator for calendar monitoring.

    All collaborators are passed in, so tests can swap the network,
    storage and notification channel for in-memory doubles.
    """

    def __init__(
        self,
        fetcher: ContentFetcher,
        store: SnapshotStore,
        notifier: ChangeNotifier,
        scraper: Optional[AgendaScraper] = None,
        abort_on_corrupt_snapshot: bool = False,
        notify_on_error: bool = False,
    ):
        self.fetcher = fetcher
        self.store = store
        self.notifier = notifier
        self.scraper = scraper or AgendaScraper()
        self.abort_on_corrupt_snapshot = abort_on_corrupt_snapshot
        self.notify_on_error = notify_on_error
        self.last_changes: Optional[ChangeSet] = None

        # Track stats
        self.stats = {
            "events_found": 0,
            "synthesized_ids": 0,
            "baseline_events": 0,
            "added": 0,
            "reopened": 0,
            "notified": False,
        }

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "CalendarMonitor":
        """Build a monitor with the collaborators selected in settings."""
        settings = settings or get_settings()

        if settings.snapshot_backend == "supabase":
            store = SupabaseSnapshotStore(settings=settings)
        else:
            store = FileSnapshotStore(settings=settings)

        if settings.notifier == "telegram":
            notifier = TelegramNotifier(settings=settings)
        elif settings.notifier == "log":
            notifier = LogNotifier()
        else:
            notifier = EmailNotifier(settings=settings)

        return cls(
            fetcher=PageFetcher(settings=settings),
            store=store,
            notifier=notifier,
            abort_on_corrupt_snapshot=settings.abort_on_corrupt_snapshot,
            notify_on_error=settings.notify_on_error,
        )

    def run(self) -> bool:
        """
        Execute one monitoring pass.

        Returns:
            bool: True if completed successfully, whether or not anything changed
        """
        logger.info("=" * 50)
        logger.info("Starting Bookwhen Watch")
        logger.info("=" * 50)

        try:
            self.last_changes = self.check()
            self._log_summary()
            return True

        except Exception as e:
            logger.error(f"Fatal error: {e}", exc_info=True)
            if self.notify_on_error:
                self._report_error(str(e))
            return False

    def check(self) -> ChangeSet:
        """
        Fetch, diff, notify and save, raising on the first failure.

        Returns:
            ChangeSet: The detected changes
        """
        html = self.fetcher.fetch()

        events = self.scraper.scrape(html)
        self.stats["events_found"] = len(events)
        self.stats["synthesized_ids"] = sum(
            1 for event in events if event.id_kind == IdKind.SYNTHESIZED
        )
        if self.stats["synthesized_ids"]:
            logger.info(
                f"{self.stats['synthesized_ids']} event(s) have no page id; "
                "edits to their title, day or time will look like new classes"
            )

        duplicates = find_duplicate_ids(events)
        if duplicates:
            logger.warning(
                f"Duplicate event ids on page (last one wins when diffing): {duplicates}"
            )

        baseline = self._load_baseline()
        self.stats["baseline_events"] = len(baseline.events)

        changes = diff_events(baseline.events, events)
        self.stats["added"] = len(changes.added)
        self.stats["reopened"] = len(changes.reopened)

        if changes.has_changes:
            self._log_changes(changes)
            self.notifier.send_changes(changes)
            self.stats["notified"] = True
        else:
            logger.info("No changes detected.")

        # Always save so the next run has an updated baseline
        self.store.save(events)
        return changes

    def _load_baseline(self) -> SnapshotLoad:
        """
        Load the previous snapshot and apply the corrupt-baseline policy.

        Raises:
            SnapshotError: If the snapshot is unusable and aborting is configured
        """
        baseline = self.store.load()

        if baseline.status == SnapshotLoadStatus.NOT_FOUND:
            logger.info(f"No previous snapshot, starting fresh ({baseline.detail})")
        elif baseline.is_corrupt:
            if self.abort_on_corrupt_snapshot:
                raise SnapshotError(f"Previous snapshot is unusable: {baseline.detail}")
            logger.warning(
                f"Previous snapshot is unusable, starting fresh: {baseline.detail}"
            )
        elif baseline.saved_at is not None:
            logger.info(
                f"Loaded {len(baseline.events)} events from snapshot saved "
                f"{baseline.saved_at.isoformat()}"
            )
        else:
            logger.info(f"Loaded {len(baseline.events)} events from snapshot")

        return baseline

    def _log_changes(self, changes: ChangeSet) -> None:
        logger.info("CHANGES DETECTED:")
        if changes.added:
            logger.info(f"Added: {ChangeFormatter.format_lines(changes.added)}")
        if changes.reopened:
            logger.info(f"Reopened: {ChangeFormatter.format_lines(changes.reopened)}")

    def _report_error(self, error_message: str) -> None:
        """Try once to tell the operator about a failed run."""
        try:
            if not self.notifier.send_error(error_message):
                logger.warning("Could not send error notification")
        except Exception as e:
            logger.warning(f"Error notification failed: {e}")

    def _log_summary(self) -> None:
        """Log execution summary."""
        logger.info("=" * 50)
        logger.info("Check Complete - Summary")
        logger.info("=" * 50)
        logger.info(f"Events found:         {self.stats['events_found']}")
        logger.info(f"Synthesized ids:      {self.stats['synthesized_ids']}")
        logger.info(f"Baseline events:      {self.stats['baseline_events']}")
        logger.info(f"Added:                {self.stats['added']}")
        logger.info(f"Reopened:             {self.stats['reopened']}")
        logger.info(f"Notification sent:    {self.stats['notified']}")
        logger.info("=" * 50)


def main() -> int:
    """
    Entry point for Bookwhen Watch.

    Returns:
        int: Exit code (0 for success, 1 for failure)
    """
    # Setup logging
    setup_logging()

    try:
        # Validate configuration early
        settings = get_settings()
        logging.getLogger().setLevel(settings.log_level)
        logger.debug(f"Loaded configuration for {settings.calendar_url}")
    except Exception as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        print("Please check your environment variables.", file=sys.stderr)
        return 1

    try:
        monitor = CalendarMonitor.from_settings(settings)
    except Exception as e:
        logger.error(f"Could not start monitor: {e}", exc_info=True)
        return 1

    success = monitor.run()

    return 0 if success else 1


if __name__ == "__main__":
    sys.exit(main())
