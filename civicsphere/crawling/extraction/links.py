"""
Outbound link discovery for crawled pages.
"""

from __future__ import annotations

from urllib.parse import urlparse

from civicsphere.crawling.extraction.base import absolute_url, is_content_element, node_text
from civicsphere.crawling.types import PageModel

SKIPPED_SCHEMES = ("#", "mailto:", "tel:", "javascript:")
NON_CONTENT_LINK_TERMS = (
    "home",
    "about",
    "contact",
    "login",
    "register",
    "logout",
    "privacy",
    "terms",
    "cookie",
    "subscribe",
    "newsletter",
    "facebook",
    "twitter",
    "instagram",
    "linkedin",
    "youtube",
    "share",
    "print",
    "email",
    "download",
)


def discover_links(page: PageModel) -> list[str]:
    """
    Return absolute, de-duplicated content links in document order.
    """

    links: list[str] = []
    seen: set[str] = set()
    for anchor in page.soup.select("a[href]"):
        href = (anchor.get("href") or "").strip()
        if not href or href.lower().startswith(SKIPPED_SCHEMES):
            continue

        text = node_text(anchor).lower()
        if any(term in text for term in NON_CONTENT_LINK_TERMS):
            continue
        if not is_content_element(anchor):
            continue

        try:
            resolved = absolute_url(page, href)
        except ValueError:
            continue
        if resolved is None or urlparse(resolved).scheme not in {"http", "https"}:
            continue
        if resolved in seen:
            continue
        seen.add(resolved)
        links.append(resolved)
    return links
