"""Calendar page source for Bookwhen Watch."""

from bookwhen_watch.source.page_fetcher import ContentFetcher, PageFetcher

__all__ = ["ContentFetcher", "PageFetcher"]
