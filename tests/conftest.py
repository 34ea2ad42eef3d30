"""
Shared fakes for crawl pipeline tests. No test touches the network.
"""

from __future__ import annotations

from collections.abc import Callable

import pytest
import requests
from bs4 import BeautifulSoup

from civicsphere.config import CrawlerSettings
from civicsphere.crawling.errors import FetchFailure
from civicsphere.crawling.fetchers.base import PageFetcher, PageHandle
from civicsphere.crawling.types import PageModel


class FakeResponse:
    def __init__(
        self,
        *,
        status_code: int = 200,
        text: str = "",
        url: str = "",
        headers: dict[str, str] | None = None,
    ) -> None:
        self.status_code = status_code
        self.text = text
        self.url = url
        self.headers = headers or {"Content-Type": "text/html; charset=utf-8"}
        self.closed = False

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"status={self.status_code}", response=self)

    def close(self) -> None:
        self.closed = True


class FakeSession:
    """
    Serves canned responses by URL; unknown URLs return 404.
    """

    def __init__(self, routes: dict[str, object] | None = None) -> None:
        self.routes = dict(routes or {})
        self.calls: list[str] = []
        self.closed = False

    def get(self, url: str, **kwargs: object) -> FakeResponse:
        self.calls.append(url)
        route = self.routes.get(url)
        if isinstance(route, list):
            route = route.pop(0)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, FakeResponse):
            if not route.url:
                route.url = url
            return route
        if isinstance(route, str):
            return FakeResponse(text=route, url=url)
        return FakeResponse(status_code=404, url=url)

    def close(self) -> None:
        self.closed = True


class FakePageFetcher(PageFetcher):
    """
    In-memory page fetcher that records navigation and handle lifecycle.
    """

    def __init__(
        self,
        *,
        settings: CrawlerSettings,
        pages: dict[str, str],
        failing: set[str] | None = None,
        fail_on_start: bool = False,
    ) -> None:
        super().__init__(settings=settings)
        self.pages = pages
        self.failing = failing or set()
        self.fail_on_start = fail_on_start
        self.opened: list[str] = []
        self.handles: list[PageHandle] = []
        self.started = False
        self.stopped = False

    def start(self) -> None:
        if self.fail_on_start:
            raise RuntimeError("browser binary missing")
        self.started = True

    def stop(self) -> None:
        self.stopped = True

    def open_page(self, url: str) -> PageHandle:
        self.opened.append(url)
        if url in self.failing or url not in self.pages:
            raise FetchFailure(url=url, reason="navigation timeout")
        handle = PageHandle(PageModel(url=url, soup=BeautifulSoup(self.pages[url], "html.parser")))
        self.handles.append(handle)
        return handle


@pytest.fixture()
def crawler_settings() -> CrawlerSettings:
    return CrawlerSettings(
        regular_delay_ms=0,
        government_delay_ms=0,
        max_retries=1,
        backoff_initial_seconds=0.1,
    )


@pytest.fixture()
def make_page() -> Callable[..., PageModel]:
    def _make(html: str, url: str = "https://example.org/") -> PageModel:
        return PageModel(url=url, soup=BeautifulSoup(html, "html.parser"))

    return _make


@pytest.fixture()
def make_session() -> Callable[..., FakeSession]:
    def _make(routes: dict[str, object] | None = None) -> FakeSession:
        return FakeSession(routes)

    return _make


@pytest.fixture()
def make_fetcher(crawler_settings: CrawlerSettings) -> Callable[..., FakePageFetcher]:
    def _make(
        pages: dict[str, str],
        *,
        failing: set[str] | None = None,
        fail_on_start: bool = False,
    ) -> FakePageFetcher:
        return FakePageFetcher(
            settings=crawler_settings,
            pages=pages,
            failing=failing,
            fail_on_start=fail_on_start,
        )

    return _make


@pytest.fixture()
def make_response() -> Callable[..., FakeResponse]:
    return FakeResponse
