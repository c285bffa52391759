"""
Message formatters for change notifications.

Formats detected changes into plain-text summaries that read the same
in an email client, a Telegram chat or a log file.
"""

from typing import List

from bookwhen_watch.models import ChangeSet, Event


class ChangeFormatter:
    """
    Formats change sets for notification.

    A summary has up to two sections, "Added classes" and "Reopened
    classes", each listing one "{title} — {time}" line per event in the
    order the changes were detected.
    """

    ADDED_HEADING = "Added classes:"
    REOPENED_HEADING = "Reopened classes:"

    @staticmethod
    def _truncate(text: str, max_length: int = 500) -> str:
        """Truncate text with ellipsis if too long."""
        if len(text) <= max_length:
            return text
        return text[:max_length - 3].rsplit(" ", 1)[0] + "..."

    @staticmethod
    def format_lines(events: List[Event]) -> List[str]:
        """One summary line per event."""
        return [event.summary_line for event in events]

    @classmethod
    def format_changes(cls, changes: ChangeSet) -> str:
        """
        Format a change set as a notification body.

        Args:
            changes: Detected changes

        Returns:
            str: Message text, empty if there are no changes
        """
        sections = []

        if changes.added:
            sections.append("\n".join([cls.ADDED_HEADING] + cls.format_lines(changes.added)))

        if changes.reopened:
            sections.append("\n".join([cls.REOPENED_HEADING] + cls.format_lines(changes.reopened)))

        return "\n\n".join(sections)

    @classmethod
    def format_error(cls, error_message: str) -> str:
        """
        Format an error notification.

        Args:
            error_message: The error to report

        Returns:
            str: Formatted error message
        """
        return (
            "Bookwhen Watch Error\n\n"
            "An error occurred while checking the calendar:\n\n"
            f"{cls._truncate(error_message, 500)}\n\n"
            "Please check the logs for more details."
        )
