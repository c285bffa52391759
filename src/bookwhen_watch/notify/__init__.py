"""Change notification module for Bookwhen Watch."""

from bookwhen_watch.notify.base import ChangeNotifier, LogNotifier
from bookwhen_watch.notify.formatters import ChangeFormatter
from bookwhen_watch.notify.mail import EmailNotifier
from bookwhen_watch.notify.telegram import TelegramNotifier

__all__ = [
    "ChangeNotifier",
    "ChangeFormatter",
    "EmailNotifier",
    "LogNotifier",
    "TelegramNotifier",
]
