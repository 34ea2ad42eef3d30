"""
Page-fetch backends and the configuration-driven factory.
"""

from __future__ import annotations

from civicsphere.config import CrawlerSettings
from civicsphere.crawling.fetchers.base import PageFetcher, PageHandle
from civicsphere.crawling.fetchers.playwright_fetcher import PlaywrightPageFetcher
from civicsphere.crawling.fetchers.requests_fetcher import RequestsPageFetcher

FETCHER_BACKENDS: dict[str, type[PageFetcher]] = {
    "requests": RequestsPageFetcher,
    "playwright": PlaywrightPageFetcher,
}


def build_page_fetcher(settings: CrawlerSettings) -> PageFetcher:
    """
    Build the fetch backend named by `settings.fetch_backend`.
    """

    fetcher_class = FETCHER_BACKENDS.get(settings.fetch_backend)
    if fetcher_class is None:
        allowed = ", ".join(sorted(FETCHER_BACKENDS))
        raise ValueError(
            f"Unknown fetch backend '{settings.fetch_backend}'. Allowed backends: {allowed}."
        )
    return fetcher_class(settings=settings)


__all__ = [
    "FETCHER_BACKENDS",
    "PageFetcher",
    "PageHandle",
    "PlaywrightPageFetcher",
    "RequestsPageFetcher",
    "build_page_fetcher",
]
