"""
Base scraper class with shared utilities.

Provides common HTML parsing and text extraction for all scrapers.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import Any, Optional

from bs4 import BeautifulSoup, Tag

logger = logging.getLogger(__name__)


class BaseScraper(ABC):
    """
    Base class for page scrapers.

    Scrapers receive raw page content and never fetch anything
    themselves, so they can be fed saved pages in tests.
    """

    # Parser handed to BeautifulSoup
    PARSER = "lxml"

    @abstractmethod
    def scrape(self, *args, **kwargs) -> Any:
        """Scrape data - implemented by subclasses."""
        pass

    def parse_html(self, html: str) -> BeautifulSoup:
        """Parse raw page content."""
        return BeautifulSoup(html, self.PARSER)

    def clean_text(self, text: Optional[str]) -> str:
        """
        Clean and normalize text content.

        Args:
            text: Text to clean

        Returns:
            str: Cleaned text
        """
        if not text:
            return ""

        # Normalize whitespace
        text = re.sub(r'\s+', ' ', text)

        return text.strip()

    def select_text(self, node: Tag, selector: str) -> str:
        """
        Text of the first element matching a CSS selector.

        Args:
            node: Element to search within
            selector: CSS selector

        Returns:
            str: Cleaned text, or "" if nothing matches
        """
        element = node.select_one(selector)
        if element is None:
            return ""
        return self.clean_text(element.get_text())

    def has_match(self, node: Tag, selector: str) -> bool:
        """Check whether any element under node matches selector."""
        return node.select_one(selector) is not None
