"""
Crawl pipeline error taxonomy.
"""

from __future__ import annotations


class CrawlError(RuntimeError):
    """
    Base class for crawl pipeline errors.
    """


class PolicyViolation(CrawlError):
    """
    Raised when robots.txt disallows crawling the start URL.
    """

    def __init__(self, *, url: str, hostname: str) -> None:
        self.url = url
        self.hostname = hostname
        super().__init__(f"Crawling not allowed by robots.txt for {hostname}")


class FetchFailure(CrawlError):
    """
    Raised when one page cannot be fetched or parsed.
    """

    def __init__(self, *, url: str, reason: str) -> None:
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to fetch {url}: {reason}")


class CapabilityUnavailable(CrawlError):
    """
    Raised when the page-fetch backend cannot be acquired.
    """
