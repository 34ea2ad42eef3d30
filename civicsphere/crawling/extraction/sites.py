"""
Site-specific extraction strategies.
"""

from __future__ import annotations

from civicsphere.crawling.extraction.base import (
    MAX_TITLE_LENGTH,
    HostnameExtractor,
    absolute_url,
    node_text,
)
from civicsphere.crawling.types import ExtractedItem, PageModel


class HackerNewsExtractor(HostnameExtractor):
    """
    Story rows from the Hacker News front page and listings.
    """

    name = "hacker_news"
    hostname_pattern = "news.ycombinator.com"
    max_items = 30
    min_title_length = 5

    def extract_items(self, page: PageModel) -> list[ExtractedItem]:
        stories: list[ExtractedItem] = []
        for row in page.soup.select(".athing")[: self.max_items]:
            title_node = row.select_one(".titleline > a")
            if title_node is None:
                continue
            title = node_text(title_node)[:MAX_TITLE_LENGTH]
            if len(title) <= self.min_title_length:
                continue

            subtext = row.find_next_sibling("tr")
            score = node_text(subtext.select_one(".score") if subtext else None) or "0 points"
            comments = (
                node_text(subtext.select_one('a[href*="item?id="]:last-child') if subtext else None)
                or "0 comments"
            )
            age = node_text(subtext.select_one(".age") if subtext else None) or "unknown"
            author = node_text(subtext.select_one(".hnuser") if subtext else None) or "unknown"

            stories.append(
                ExtractedItem(
                    title=title,
                    content=f"{score} by {author} {age} | {comments}",
                    url=absolute_url(page, title_node.get("href")) or page.url,
                    type="news",
                    metadata={
                        "score": score,
                        "author": author,
                        "age": age,
                        "comments": comments,
                    },
                )
            )
        return stories


class BooksToScrapeExtractor(HostnameExtractor):
    """
    Product cards from the books.toscrape.com catalogue.
    """

    name = "books_to_scrape"
    hostname_pattern = "books.toscrape.com"
    max_items = 50
    min_title_length = 3

    def extract_items(self, page: PageModel) -> list[ExtractedItem]:
        books: list[ExtractedItem] = []
        for card in page.soup.select("article.product_pod")[: self.max_items]:
            title_node = card.select_one("h3 a")
            if title_node is None:
                continue
            title = (title_node.get("title") or node_text(title_node)).strip()[:MAX_TITLE_LENGTH]
            if len(title) <= self.min_title_length:
                continue

            price = node_text(card.select_one(".price_color")) or None
            image = card.find("img", src=True)
            rating = self._rating(card.select_one('[class*="star-rating"]'))

            metadata: dict[str, str] = {}
            if price:
                metadata["price"] = price
            if rating:
                metadata["rating"] = rating
            image_url = absolute_url(page, image.get("src") if image else None)
            if image_url:
                metadata["image_url"] = image_url

            books.append(
                ExtractedItem(
                    title=title,
                    content=f"Price: {price or 'N/A'}, Rating: {rating or 'N/A'}",
                    url=absolute_url(page, title_node.get("href")) or page.url,
                    type="product",
                    metadata=metadata,
                )
            )
        return books

    @staticmethod
    def _rating(node) -> str | None:
        if node is None:
            return None
        classes = node.get("class") or []
        for index, name in enumerate(classes):
            if name == "star-rating" and index + 1 < len(classes):
                return classes[index + 1]
        return None
