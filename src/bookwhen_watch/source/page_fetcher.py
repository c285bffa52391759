"""
Calendar page fetching.

Downloads the Bookwhen agenda page with a browser-like session.
Bookwhen's public pages need no login.
"""

import logging
from typing import Optional, Protocol

import requests

from bookwhen_watch.config import Settings, get_settings
from bookwhen_watch.errors import FetchError

logger = logging.getLogger(__name__)


class ContentFetcher(Protocol):
    """Anything that can return the raw calendar page."""

    def fetch(self) -> str:
        ...


class PageFetcher:
    """
    Fetches the calendar page over HTTP.

    A single attempt per call: network errors, timeouts and non-2xx
    responses are raised as FetchError and never retried.
    """

    # User agent to mimic a real browser
    USER_AGENT = (
        "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
        "AppleWebKit/537.36 (KHTML, like Gecko) "
        "Chrome/121.0.0.0 Safari/537.36"
    )

    def __init__(
        self,
        url: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        settings: Optional[Settings] = None,
    ):
        """
        Initialize the fetcher.

        Args:
            url: Page to fetch, defaults to CALENDAR_URL
            timeout: Request timeout in seconds, defaults to REQUEST_TIMEOUT
            session: Optional requests session (e.g. a test double)
            settings: Optional settings instance, will use default if not provided
        """
        if url is None or timeout is None:
            settings = settings or get_settings()
            url = url or settings.calendar_url
            timeout = timeout or settings.request_timeout

        self.url = url
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.headers.update({
            "User-Agent": self.USER_AGENT,
            "Accept": "text/html,application/xhtml+xml",
        })

    def fetch(self) -> str:
        """
        Download the page.

        Returns:
            str: Raw page content

        Raises:
            FetchError: On network failure, timeout or non-success status
        """
        logger.info(f"Fetching {self.url}")

        try:
            response = self.session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.Timeout as e:
            raise FetchError(f"Timed out after {self.timeout}s fetching {self.url}") from e
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Could not fetch {self.url}: {e}") from e

        logger.debug(f"Fetched {len(response.text)} characters ({response.status_code})")
        return response.text
