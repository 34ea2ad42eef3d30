"""
Plain HTTP page fetcher backed by requests.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

import requests
from bs4 import BeautifulSoup

from civicsphere.config import CrawlerSettings
from civicsphere.crawling.errors import FetchFailure
from civicsphere.crawling.fetchers.base import PageFetcher, PageHandle
from civicsphere.crawling.logging_utils import log_event
from civicsphere.crawling.types import PageModel

logger = logging.getLogger(__name__)

TRANSIENT_STATUS_CODES = frozenset({500, 502, 503, 504})
TOO_MANY_REQUESTS = 429
HTML_CONTENT_TYPES = ("text/html", "application/xhtml+xml")


class RequestsPageFetcher(PageFetcher):
    """
    Fetches static HTML, retrying transient failures with exponential backoff.

    A retry never waits less than the crawl's politeness delay or the
    server's Retry-After. A 429 is a page failure and is not retried.
    """

    def __init__(
        self,
        *,
        settings: CrawlerSettings,
        session: requests.Session | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(settings=settings)
        self._session = session if session is not None else requests.Session()
        self._sleep = sleep

    def open_page(self, url: str) -> PageHandle:
        response = self._get(url)
        try:
            content_type = response.headers.get("Content-Type", "text/html").lower()
            if not content_type.startswith(HTML_CONTENT_TYPES):
                raise FetchFailure(url=url, reason=f"non-HTML content type {content_type!r}")
            document = BeautifulSoup(response.text, "html.parser")
        except Exception:
            response.close()
            raise
        page = PageModel(url=response.url or url, soup=document)
        return PageHandle(page, on_close=response.close)

    def stop(self) -> None:
        self._session.close()

    def _get(self, url: str) -> requests.Response:
        attempts = self.settings.max_retries + 1
        reason = "no attempt made"
        server_delay: float | None = None

        for attempt in range(attempts):
            try:
                response = self._session.get(
                    url,
                    headers=self.request_headers,
                    timeout=self.settings.navigation_timeout_seconds,
                    allow_redirects=True,
                )
            except (requests.Timeout, requests.ConnectionError) as exc:
                reason = f"{type(exc).__name__}: {exc}"
                server_delay = None
            except requests.RequestException as exc:
                raise FetchFailure(url=url, reason=str(exc)) from exc
            else:
                if response.status_code == TOO_MANY_REQUESTS:
                    retry_after = _retry_after_seconds(response)
                    response.close()
                    raise FetchFailure(
                        url=url,
                        reason=f"rate limited status=429 retry_after={retry_after}",
                    )
                if response.status_code not in TRANSIENT_STATUS_CODES:
                    try:
                        response.raise_for_status()
                    except requests.HTTPError as exc:
                        raise FetchFailure(url=url, reason=str(exc)) from exc
                    return response
                reason = f"transient status={response.status_code}"
                server_delay = _retry_after_seconds(response)
                response.close()

            if attempt + 1 < attempts:
                delay = max(
                    self._backoff_seconds(attempt),
                    self.min_retry_delay_seconds,
                    server_delay or 0.0,
                )
                log_event(
                    logger,
                    logging.WARNING,
                    "page_fetch_retry",
                    url=url,
                    attempt=attempt + 1,
                    reason=reason,
                    delay_seconds=delay,
                )
                self._sleep(delay)

        raise FetchFailure(url=url, reason=f"retries exhausted: {reason}")

    def _backoff_seconds(self, attempt: int) -> float:
        return self.settings.backoff_initial_seconds * (self.settings.backoff_multiplier**attempt)


def _retry_after_seconds(response: requests.Response) -> float | None:
    """
    Delta-seconds form of Retry-After; HTTP-date values are ignored.
    """

    raw_value = (response.headers.get("Retry-After") or "").strip()
    try:
        return max(0.0, float(raw_value)) if raw_value else None
    except ValueError:
        return None
