"""
Page-fetch capability interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from types import TracebackType

from civicsphere.config import CrawlerSettings
from civicsphere.crawling.types import PageModel

DEFAULT_BROWSER_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "Accept-Language": "en-US,en;q=0.5",
    "DNT": "1",
    "Upgrade-Insecure-Requests": "1",
}


class PageHandle:
    """
    One acquired page. `close()` is idempotent and must always be called.
    """

    def __init__(self, page: PageModel, *, on_close: Callable[[], None] | None = None) -> None:
        self.page = page
        self._on_close = on_close
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._on_close is not None:
            self._on_close()


class PageFetcher(ABC):
    """
    Acquires a fetch backend for the duration of a crawl and opens pages.
    """

    def __init__(self, *, settings: CrawlerSettings) -> None:
        self.settings = settings
        self.request_headers = {"User-Agent": settings.user_agent, **DEFAULT_BROWSER_HEADERS}
        self.min_retry_delay_seconds = 0.0

    def __enter__(self) -> "PageFetcher":
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.stop()

    def apply_politeness_delay(self, delay_ms: int) -> None:
        """
        Never wait less than the crawl's politeness delay before re-requesting a URL.
        """

        self.min_retry_delay_seconds = max(0, delay_ms) / 1000.0

    def start(self) -> None:
        """
        Acquire backend resources. Raise CapabilityUnavailable on failure.
        """

    def stop(self) -> None:
        """
        Release backend resources.
        """

    @abstractmethod
    def open_page(self, url: str) -> PageHandle:
        """
        Navigate to `url` and return a handle. Raise FetchFailure on failure.
        """
