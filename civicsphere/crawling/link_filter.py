"""
In-scope decisions for discovered links.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from urllib.parse import urlparse

SKIP_PATTERNS = (
    re.compile(r"\.(pdf|doc|docx|xls|xlsx|ppt|pptx|zip|rar|exe|jpg|jpeg|png|gif|svg|css|js)$", re.IGNORECASE),
    re.compile(r"/(login|logout|admin|api|ajax|search|cart|checkout|account)", re.IGNORECASE),
    re.compile(r"\?.*download", re.IGNORECASE),
    re.compile(r"\?.*sort=", re.IGNORECASE),
    re.compile(r"\?.*filter=", re.IGNORECASE),
    re.compile(r"#"),
    re.compile(r"/(privacy|terms|cookie|about|contact|help|support)/?$", re.IGNORECASE),
)
CONTENT_PATTERNS = (
    re.compile(r"/(article|post|blog|news|story|product|item)", re.IGNORECASE),
    re.compile(r"/\d+"),
    re.compile(r"/[a-z-]+/", re.IGNORECASE),
)

SiteRule = Callable[[str], bool]


def _books_to_scrape_rule(url: str) -> bool:
    return "/catalogue/" in url or "/page_" in url


DEFAULT_SITE_RULES: tuple[tuple[str, SiteRule], ...] = (
    ("books.toscrape.com", _books_to_scrape_rule),
)


def _normalize(url: str) -> str:
    parsed = urlparse(url)
    if parsed.netloc and not parsed.path:
        return parsed._replace(path="/").geturl()
    return url


class LinkFilter:
    """
    Screens discovered URLs before they enter the frontier.
    """

    def __init__(
        self,
        *,
        allowed_domains: Iterable[str],
        start_url: str,
        site_rules: Iterable[tuple[str, SiteRule]] = DEFAULT_SITE_RULES,
    ) -> None:
        self._allowed_domains = frozenset(domain.lower() for domain in allowed_domains)
        self._start_url = _normalize(start_url)
        self._site_rules = tuple(site_rules)

    def is_in_scope(self, url: str) -> bool:
        try:
            parsed = urlparse(url)
            hostname = (parsed.hostname or "").lower()
        except ValueError:
            return False
        if parsed.scheme not in {"http", "https"} or hostname not in self._allowed_domains:
            return False

        for host_pattern, rule in self._site_rules:
            if host_pattern in hostname:
                return rule(url)

        # Host is already validated; match patterns against the path onward.
        remainder = url.split(parsed.netloc, 1)[1] if parsed.netloc else url
        if any(pattern.search(remainder) for pattern in SKIP_PATTERNS):
            return False
        if _normalize(url) == self._start_url:
            return True
        return any(pattern.search(remainder) for pattern in CONTENT_PATTERNS)
