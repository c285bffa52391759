"""
Notifier interface.

Every notification channel exposes the same calls, so the monitor
can be handed any of them (or a test double) at start-up.
"""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from bookwhen_watch.errors import NotificationError
from bookwhen_watch.models import ChangeSet
from bookwhen_watch.notify.formatters import ChangeFormatter

logger = logging.getLogger(__name__)


class ChangeNotifier(ABC):
    """Delivers change summaries to the operator."""

    def __init__(self, formatter: Optional[ChangeFormatter] = None):
        self.formatter = formatter or ChangeFormatter()

    @abstractmethod
    def send_message(self, message: str) -> bool:
        """
        Deliver a plain-text message.

        Returns:
            bool: True if the message was delivered
        """
        pass

    def send_changes(self, changes: ChangeSet) -> None:
        """
        Deliver a summary of changes.

        Raises:
            NotificationError: If delivery fails
        """
        message = self.formatter.format_changes(changes)
        if not self.send_message(message):
            raise NotificationError(
                f"{type(self).__name__} could not deliver {changes.total} change(s)"
            )

    def send_error(self, error_message: str) -> bool:
        """Deliver a short error report. Returns False if it could not be sent."""
        return self.send_message(self.formatter.format_error(error_message))


class LogNotifier(ChangeNotifier):
    """Writes change summaries to the log instead of sending them anywhere."""

    def send_message(self, message: str) -> bool:
        for line in message.splitlines():
            logger.info(line)
        return True
