"""
Generic extraction for sites without a dedicated strategy.
"""

from __future__ import annotations

from bs4 import Tag

from civicsphere.crawling.extraction.base import (
    MAX_CONTENT_LENGTH,
    MAX_TITLE_LENGTH,
    SiteExtractor,
    absolute_url,
    is_content_element,
    is_metadata_text,
    is_navigation_text,
    node_text,
)
from civicsphere.crawling.types import ExtractedItem, PageModel

CONTENT_SELECTORS = (
    "article",
    "main article",
    ".article",
    ".post",
    ".story",
    ".news-item",
    ".content-item",
    ".list-item",
    "main .content",
    ".main-content",
    '[role="article"]',
)
TITLE_SELECTOR = "h1, h2, h3, h4, h5, h6, .title, .heading"
BODY_SELECTOR = "p, .content, .description, .summary, .excerpt"
HEADING_SELECTOR = "h1, h2, h3, h4, h5, h6"

MAX_ELEMENTS_PER_SELECTOR = 30
MIN_CONTAINER_TITLE_LENGTH = 10
MIN_CONTAINER_CONTENT_LENGTH = 20
MAX_FALLBACK_HEADINGS = 20
MIN_FALLBACK_TITLE_LENGTH = 15
MAX_FALLBACK_CONTENT_LENGTH = 500


class GenericExtractor(SiteExtractor):
    """
    Container pass first; heading pass only when no container yields items.
    """

    name = "generic"

    def matches(self, hostname: str) -> bool:
        return True

    def extract_items(self, page: PageModel) -> list[ExtractedItem]:
        items = self.extract_containers(page)
        if items:
            return items
        return self.extract_headings(page)

    def extract_containers(self, page: PageModel) -> list[ExtractedItem]:
        for selector in CONTENT_SELECTORS:
            elements = page.soup.select(selector)
            if not elements:
                continue

            items: list[ExtractedItem] = []
            for element in elements[:MAX_ELEMENTS_PER_SELECTOR]:
                if not is_content_element(element):
                    continue
                item = self._container_item(page, element)
                if item is not None:
                    items.append(item)
            if items:
                return items
        return []

    def extract_headings(self, page: PageModel) -> list[ExtractedItem]:
        items: list[ExtractedItem] = []
        for heading in page.soup.select(HEADING_SELECTOR)[:MAX_FALLBACK_HEADINGS]:
            if not is_content_element(heading):
                continue
            title = node_text(heading)
            if not (MIN_FALLBACK_TITLE_LENGTH < len(title) < MAX_TITLE_LENGTH):
                continue
            if is_metadata_text(title) or is_navigation_text(title):
                continue

            nearby = (
                node_text(heading.find_next_sibling())
                or node_text(heading.parent if isinstance(heading.parent, Tag) else None)
                or title
            )
            link = heading.find("a", href=True) or heading.find_parent("a", href=True)
            items.append(
                ExtractedItem(
                    title=title,
                    content=nearby[:MAX_FALLBACK_CONTENT_LENGTH],
                    url=absolute_url(page, link.get("href") if link else None) or page.url,
                    type="content",
                )
            )
        return items

    @staticmethod
    def _container_item(page: PageModel, element: Tag) -> ExtractedItem | None:
        title_node = element.select_one(TITLE_SELECTOR) or element.find("a")
        if title_node is None:
            return None

        title = node_text(title_node)
        content = node_text(element.select_one(BODY_SELECTOR) or element)
        if not (MIN_CONTAINER_TITLE_LENGTH < len(title) < MAX_TITLE_LENGTH):
            return None
        if len(content) <= MIN_CONTAINER_CONTENT_LENGTH:
            return None
        if is_metadata_text(title) or is_navigation_text(title):
            return None

        link = element.find("a", href=True) or element.find_parent("a", href=True)
        image = element.find("img", src=True)
        metadata: dict[str, str] = {}
        image_url = absolute_url(page, image.get("src") if image else None)
        if image_url:
            metadata["image_url"] = image_url

        return ExtractedItem(
            title=title,
            content=content[:MAX_CONTENT_LENGTH],
            url=absolute_url(page, link.get("href") if link else None) or page.url,
            type="article",
            metadata=metadata,
        )
