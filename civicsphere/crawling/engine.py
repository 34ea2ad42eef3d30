"""
Breadth-first crawl orchestration.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from contextlib import closing
from urllib.parse import urlparse

import requests

from civicsphere.config import CrawlerSettings
from civicsphere.crawling.errors import CapabilityUnavailable, PolicyViolation
from civicsphere.crawling.extraction import ContentExtractor
from civicsphere.crawling.fetchers import PageFetcher, build_page_fetcher
from civicsphere.crawling.link_filter import LinkFilter
from civicsphere.crawling.logging_utils import log_event
from civicsphere.crawling.robots import PolitenessGuard
from civicsphere.crawling.types import CrawlJob, CrawlOptions, CrawlResult, FrontierEntry

logger = logging.getLogger(__name__)


class CrawlOrchestrator:
    """
    Drives one breadth-first crawl per `crawl()` call.

    The orchestrator holds only collaborators. Frontier, visited set and
    statistics live on a CrawlJob created for each invocation, so concurrent
    invocations never share traversal state.
    """

    def __init__(
        self,
        *,
        settings: CrawlerSettings,
        extractor: ContentExtractor | None = None,
        fetcher_factory: Callable[[], PageFetcher] | None = None,
        session_factory: Callable[[], requests.Session] = requests.Session,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settings = settings
        self._extractor = extractor or ContentExtractor.from_paths(settings.extra_extractors)
        self._fetcher_factory = fetcher_factory or (lambda: build_page_fetcher(settings))
        self._session_factory = session_factory
        self._sleep = sleep

    def crawl(
        self,
        start_url: str,
        options: CrawlOptions | None = None,
        *,
        cancel_event: threading.Event | None = None,
    ) -> CrawlResult:
        """
        Crawl from `start_url` and return extracted items with statistics.

        Raises PolicyViolation before any page fetch when robots.txt
        disallows the start URL, and CapabilityUnavailable when the fetch
        backend cannot be acquired.
        """

        options = options or CrawlOptions(
            max_depth=self._settings.default_max_depth,
            max_pages=self._settings.default_max_pages,
        )
        parsed = urlparse(start_url)
        if parsed.scheme not in {"http", "https"} or not parsed.hostname:
            raise ValueError(f"Start URL must be an absolute http(s) URL: {start_url!r}")

        job = CrawlJob.create(start_url=start_url, options=options)
        log_event(
            logger,
            logging.INFO,
            "crawl_started",
            start_url=start_url,
            user_agent=self._settings.user_agent,
            max_depth=job.max_depth,
            max_pages=job.max_pages,
            allowed_domains=sorted(job.allowed_domains),
        )

        with closing(self._session_factory()) as session:
            guard = PolitenessGuard(
                settings=self._settings,
                session=session,
                on_check=job.robots_checked.append,
            )
            if not guard.check_robots(start_url):
                raise PolicyViolation(url=start_url, hostname=job.start_hostname)

            delay_ms = guard.determine_delay(job.start_hostname, override=options.delay_ms)
            link_filter = LinkFilter(allowed_domains=job.allowed_domains, start_url=start_url)

            fetcher = self._fetcher_factory()
            fetcher.apply_politeness_delay(delay_ms)
            try:
                fetcher.start()
            except CapabilityUnavailable:
                raise
            except Exception as exc:
                raise CapabilityUnavailable(f"Unable to acquire page fetcher: {exc}") from exc

            try:
                self._traverse(
                    job=job,
                    fetcher=fetcher,
                    guard=guard,
                    link_filter=link_filter,
                    delay_ms=delay_ms,
                    cancel_event=cancel_event,
                )
            finally:
                fetcher.stop()

        result = job.finish()
        log_event(
            logger,
            logging.INFO,
            "crawl_completed",
            start_url=start_url,
            **{key: value for key, value in result.stats.to_dict().items() if key != "robots_checked"},
        )
        return result

    def _traverse(
        self,
        *,
        job: CrawlJob,
        fetcher: PageFetcher,
        guard: PolitenessGuard,
        link_filter: LinkFilter,
        delay_ms: int,
        cancel_event: threading.Event | None,
    ) -> None:
        while job.has_budget():
            if cancel_event is not None and cancel_event.is_set():
                log_event(logger, logging.WARNING, "crawl_cancelled", start_url=job.start_url)
                break

            entry = job.frontier.popleft()
            if entry.url in job.visited or entry.depth > job.max_depth:
                continue

            if entry.url != job.start_url and not guard.check_robots(entry.url):
                job.mark_visited(entry.url)
                job.blocked_requests += 1
                log_event(logger, logging.WARNING, "page_blocked_by_robots", url=entry.url)
                continue

            self._crawl_page(job=job, fetcher=fetcher, link_filter=link_filter, entry=entry)

            if delay_ms > 0 and job.has_budget():
                self._sleep(delay_ms / 1000.0)

    def _crawl_page(
        self,
        *,
        job: CrawlJob,
        fetcher: PageFetcher,
        link_filter: LinkFilter,
        entry: FrontierEntry,
    ) -> None:
        job.total_requests += 1
        try:
            with closing(fetcher.open_page(entry.url)) as handle:
                extraction = self._extractor.extract(handle.page)
        except Exception as exc:
            job.mark_visited(entry.url)
            job.failed_requests += 1
            log_event(
                logger,
                logging.ERROR,
                "page_crawl_failed",
                url=entry.url,
                depth=entry.depth,
                error=str(exc),
            )
            return

        job.items.extend(extraction.items)
        queued = 0
        if entry.depth < job.max_depth:
            for link in extraction.links:
                if link not in job.visited and link_filter.is_in_scope(link):
                    queued += int(job.enqueue(link, depth=entry.depth + 1))

        job.mark_visited(entry.url)
        job.crawled_pages += 1
        job.successful_requests += 1
        hostname = (urlparse(entry.url).hostname or "").lower()
        if hostname:
            job.visited_domains[hostname] = None
        log_event(
            logger,
            logging.INFO,
            "page_crawled",
            url=entry.url,
            depth=entry.depth,
            items=len(extraction.items),
            links_queued=queued,
        )
