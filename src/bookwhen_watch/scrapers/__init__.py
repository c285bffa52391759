"""Bookwhen page scrapers."""

from bookwhen_watch.scrapers.agenda import AgendaScraper, find_duplicate_ids

__all__ = [
    "AgendaScraper",
    "find_duplicate_ids",
]
