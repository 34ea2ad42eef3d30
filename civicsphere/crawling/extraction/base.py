"""
Shared extraction helpers and the site extractor interface.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from urllib.parse import urljoin

from bs4 import Tag

from civicsphere.crawling.types import ExtractedItem, PageModel

MAX_ITEMS_PER_PAGE = 50
MAX_TITLE_LENGTH = 300
MAX_CONTENT_LENGTH = 1000

EXCLUDED_REGION_SELECTOR = ", ".join(
    [
        "nav",
        "header",
        "footer",
        ".nav",
        ".navbar",
        ".menu",
        ".sidebar",
        ".breadcrumb",
        ".pagination",
        ".advertisement",
        ".ad",
        ".banner",
        ".social",
        ".share",
        ".cookie",
        ".popup",
        ".modal",
        ".overlay",
        "script",
        "style",
        "noscript",
    ]
)

METADATA_PATTERNS = (
    re.compile(r"^\d+\s+(points?|pts?)\s+by\s+", re.IGNORECASE),
    re.compile(r"^\d+\s+(comments?|hrs?|minutes?|days?)\s+ago", re.IGNORECASE),
    re.compile(r"^(hide|reply|flag|favorite|share)$", re.IGNORECASE),
    re.compile(r"^\d+\s+(votes?|likes?|shares?)$", re.IGNORECASE),
    re.compile(r"^(posted|submitted|by|ago|comments?)\s", re.IGNORECASE),
)
NAVIGATION_PATTERNS = (
    re.compile(r"^(home|about|contact|login|register|search|menu|nav)$", re.IGNORECASE),
    re.compile(r"^(cookie|privacy|terms|subscribe|newsletter)$", re.IGNORECASE),
    re.compile(r"^(next|previous|more|load|show)\s", re.IGNORECASE),
)


def clean_text(value: str | None) -> str:
    if not value:
        return ""
    return re.sub(r"\s+", " ", value).strip()


def node_text(node: Tag | None) -> str:
    if node is None:
        return ""
    return clean_text(node.get_text(" ", strip=True))


def is_content_element(node: Tag) -> bool:
    """
    False when `node` is, or sits inside, navigation, ads, overlays or scripts.
    """

    return node.css.closest(EXCLUDED_REGION_SELECTOR) is None


def is_metadata_text(text: str) -> bool:
    stripped = text.strip()
    return any(pattern.search(stripped) for pattern in METADATA_PATTERNS)


def is_navigation_text(text: str) -> bool:
    stripped = text.strip()
    return any(pattern.search(stripped) for pattern in NAVIGATION_PATTERNS)


def absolute_url(page: PageModel, href: str | None) -> str | None:
    if not href or not href.strip():
        return None
    return urljoin(page.url, href.strip())


class SiteExtractor(ABC):
    """
    Extraction strategy for pages of one kind of site.
    """

    name: str = "site"

    @abstractmethod
    def matches(self, hostname: str) -> bool:
        """
        Return whether this strategy handles pages from `hostname`.
        """

    @abstractmethod
    def extract_items(self, page: PageModel) -> list[ExtractedItem]:
        """
        Return candidate items found on `page`.
        """


class HostnameExtractor(SiteExtractor):
    """
    Strategy matched by a hostname substring.
    """

    hostname_pattern: str = ""

    def matches(self, hostname: str) -> bool:
        return bool(self.hostname_pattern) and self.hostname_pattern in hostname.lower()
