"""
Rendered page fetcher backed by a headless Chromium through Playwright.
"""

from __future__ import annotations

import logging
from typing import Any

from bs4 import BeautifulSoup

from civicsphere.config import CrawlerSettings
from civicsphere.crawling.errors import CapabilityUnavailable, FetchFailure
from civicsphere.crawling.fetchers.base import PageFetcher, PageHandle
from civicsphere.crawling.logging_utils import log_event
from civicsphere.crawling.types import PageModel

logger = logging.getLogger(__name__)

BROWSER_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-gpu",
]


class PlaywrightPageFetcher(PageFetcher):
    """
    Opens one browser per crawl and one page per URL.
    """

    def __init__(self, *, settings: CrawlerSettings, headless: bool = True) -> None:
        super().__init__(settings=settings)
        self._headless = headless
        self._playwright: Any = None
        self._browser: Any = None
        self._context: Any = None

    def start(self) -> None:
        try:
            from playwright.sync_api import sync_playwright
        except ImportError as exc:
            raise CapabilityUnavailable(
                "playwright package is required for the playwright fetch backend. "
                "Install it with: pip install 'civicsphere-crawler[browser]'"
            ) from exc

        try:
            self._playwright = sync_playwright().start()
            self._browser = self._playwright.chromium.launch(
                headless=self._headless,
                args=BROWSER_ARGS,
            )
            self._context = self._browser.new_context(
                user_agent=self.settings.user_agent,
                extra_http_headers={
                    key: value for key, value in self.request_headers.items() if key != "User-Agent"
                },
            )
        except Exception as exc:
            self.stop()
            raise CapabilityUnavailable(f"Unable to launch browser: {exc}") from exc
        log_event(logger, logging.INFO, "browser_started", headless=self._headless)

    def stop(self) -> None:
        for resource, closer in (
            (self._context, "close"),
            (self._browser, "close"),
            (self._playwright, "stop"),
        ):
            if resource is None:
                continue
            try:
                getattr(resource, closer)()
            except Exception as exc:
                log_event(logger, logging.WARNING, "browser_release_failed", error=str(exc))
        self._context = None
        self._browser = None
        self._playwright = None

    def open_page(self, url: str) -> PageHandle:
        if self._context is None:
            raise CapabilityUnavailable("Browser context is not started.")

        page = self._context.new_page()
        try:
            response = page.goto(
                url,
                wait_until="domcontentloaded",
                timeout=int(self.settings.navigation_timeout_seconds * 1000),
            )
            if response is not None and not response.ok:
                raise FetchFailure(url=url, reason=f"status={response.status}")
            soup = BeautifulSoup(page.content(), "html.parser")
            final_url = page.url or url
        except FetchFailure:
            page.close()
            raise
        except Exception as exc:
            page.close()
            raise FetchFailure(url=url, reason=str(exc)) from exc
        return PageHandle(PageModel(url=final_url, soup=soup), on_close=page.close)
