"""
Shared crawl runtime data models.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any
from urllib.parse import urlparse

from bs4 import BeautifulSoup

ITEM_TYPES = ("article", "news", "product", "content")


@dataclass(frozen=True)
class PageModel:
    """
    DOM-queryable view of one fetched page.
    """

    url: str
    soup: BeautifulSoup

    @property
    def hostname(self) -> str:
        return (urlparse(self.url).hostname or "").lower()


@dataclass(frozen=True)
class ExtractedItem:
    """
    One candidate notice extracted from a page.
    """

    title: str
    content: str
    url: str
    type: str = "content"
    metadata: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.title:
            raise ValueError("ExtractedItem.title must not be empty.")
        if self.type not in ITEM_TYPES:
            raise ValueError(f"Unknown item type '{self.type}'. Allowed: {list(ITEM_TYPES)}.")

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "content": self.content,
            "url": self.url,
            "type": self.type,
            "metadata": dict(self.metadata),
        }


@dataclass(frozen=True)
class ExtractionResult:
    """
    Items and outbound links found on one page.
    """

    items: list[ExtractedItem] = field(default_factory=list)
    links: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class FrontierEntry:
    url: str
    depth: int


@dataclass(frozen=True)
class RobotsCheck:
    domain: str
    allowed: bool


@dataclass(frozen=True)
class CrawlOptions:
    """
    Caller-provided limits for one crawl invocation.
    """

    max_depth: int = 3
    max_pages: int = 50
    allowed_domains: tuple[str, ...] = ()
    delay_ms: int | None = None

    def __post_init__(self) -> None:
        if self.max_depth < 0:
            raise ValueError("max_depth must be >= 0.")
        if self.max_pages < 1:
            raise ValueError("max_pages must be >= 1.")
        if self.delay_ms is not None and self.delay_ms < 0:
            raise ValueError("delay_ms must be >= 0.")


@dataclass(frozen=True)
class CrawlStats:
    """
    Final statistics for one crawl invocation.
    """

    started_at: datetime
    finished_at: datetime
    total_requests: int
    successful_requests: int
    failed_requests: int
    blocked_requests: int
    robots_checked: tuple[RobotsCheck, ...]
    visited_domains: tuple[str, ...]
    total_pages: int
    total_urls: int
    items_found: int

    @property
    def duration_ms(self) -> int:
        return int((self.finished_at - self.started_at).total_seconds() * 1000)

    def to_dict(self) -> dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat(),
            "duration_ms": self.duration_ms,
            "total_requests": self.total_requests,
            "successful_requests": self.successful_requests,
            "failed_requests": self.failed_requests,
            "blocked_requests": self.blocked_requests,
            "robots_checked": [
                {"domain": check.domain, "allowed": check.allowed}
                for check in self.robots_checked
            ],
            "visited_domains": list(self.visited_domains),
            "total_pages": self.total_pages,
            "total_urls": self.total_urls,
            "items_found": self.items_found,
        }


@dataclass(frozen=True)
class CrawlResult:
    items: list[ExtractedItem]
    stats: CrawlStats


@dataclass
class CrawlJob:
    """
    Mutable state owned by exactly one crawl invocation.
    """

    start_url: str
    max_depth: int
    max_pages: int
    allowed_domains: frozenset[str]
    frontier: deque[FrontierEntry] = field(default_factory=deque)
    queued: set[str] = field(default_factory=set)
    visited: set[str] = field(default_factory=set)
    items: list[ExtractedItem] = field(default_factory=list)
    crawled_pages: int = 0
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    blocked_requests: int = 0
    robots_checked: list[RobotsCheck] = field(default_factory=list)
    visited_domains: dict[str, None] = field(default_factory=dict)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def create(cls, *, start_url: str, options: CrawlOptions) -> "CrawlJob":
        hostname = (urlparse(start_url).hostname or "").lower()
        allowed = {hostname}
        allowed.update(domain.strip().lower() for domain in options.allowed_domains if domain.strip())
        job = cls(
            start_url=start_url,
            max_depth=options.max_depth,
            max_pages=options.max_pages,
            allowed_domains=frozenset(allowed),
        )
        job.visited_domains[hostname] = None
        job.enqueue(start_url, depth=0)
        return job

    @property
    def start_hostname(self) -> str:
        return (urlparse(self.start_url).hostname or "").lower()

    def enqueue(self, url: str, *, depth: int) -> bool:
        """
        Queue `url` unless it was already queued or visited.
        """

        if depth > self.max_depth or url in self.visited or url in self.queued:
            return False
        self.queued.add(url)
        self.frontier.append(FrontierEntry(url=url, depth=depth))
        return True

    def has_budget(self) -> bool:
        return bool(self.frontier) and self.crawled_pages < self.max_pages

    def mark_visited(self, url: str) -> None:
        self.visited.add(url)
        self.queued.discard(url)

    def finish(self) -> CrawlResult:
        stats = CrawlStats(
            started_at=self.started_at,
            finished_at=datetime.now(timezone.utc),
            total_requests=self.total_requests,
            successful_requests=self.successful_requests,
            failed_requests=self.failed_requests,
            blocked_requests=self.blocked_requests,
            robots_checked=tuple(self.robots_checked),
            visited_domains=tuple(self.visited_domains),
            total_pages=self.crawled_pages,
            total_urls=len(self.visited),
            items_found=len(self.items),
        )
        return CrawlResult(items=list(self.items), stats=stats)
