from __future__ import annotations

import pytest

from civicsphere.crawling.extraction import (
    ContentExtractor,
    ExtractorRegistry,
    GenericExtractor,
    HostnameExtractor,
    discover_links,
)
from civicsphere.crawling.types import ExtractedItem, PageModel

CONTAINER_AND_HEADING_PAGE = """
<html><body>
  <h2>Standalone heading about the monsoon preparedness plan</h2>
  <p>District officials outlined evacuation routes for coastal villages.</p>
  <article>
    <h2>Ministry announces new scholarship scheme</h2>
    <p>Students from rural districts can apply online before the end of July.</p>
    <a href="/news/scholarship-2024">Full notice</a>
    <img src="/img/scholarship.png">
  </article>
</body></html>
"""

HEADINGS_ONLY_PAGE = """
<html><body>
  <nav><h2>Site navigation links and menus</h2></nav>
  <div>
    <h3>Water supply interruption in Ward 12 on Friday</h3>
    <p>Supply will be suspended from 9 AM to 5 PM for pipeline maintenance.</p>
  </div>
  <h3>Home</h3>
</body></html>
"""

HACKER_NEWS_PAGE = """
<html><body><table>
  <tr class="athing" id="1">
    <td class="title"><span class="titleline"><a href="https://example.com/story">Show HN: A civic notice tracker</a></span></td>
  </tr>
  <tr>
    <td class="subtext"><span class="score">42 points</span> by <a class="hnuser" href="user?id=alice">alice</a>
    <span class="age">3 hours ago</span> | <a href="item?id=1">10 comments</a></td>
  </tr>
  <tr class="athing" id="2">
    <td class="title"><span class="titleline"><a href="item?id=2">Ask</a></span></td>
  </tr>
</table></body></html>
"""

BOOKS_PAGE = """
<html><body><ol class="row"><li>
  <article class="product_pod">
    <div class="image_container">
      <a href="catalogue/a-light-in-the-attic_1000/index.html"><img src="media/cache/attic.jpg" alt="A Light in the Attic"></a>
    </div>
    <p class="star-rating Three"></p>
    <h3><a href="catalogue/a-light-in-the-attic_1000/index.html" title="A Light in the Attic">A Light in the ...</a></h3>
    <div class="product_price"><p class="price_color">£51.77</p></div>
  </article>
</li></ol></body></html>
"""


class TestGenericExtractor:
    def test_container_items_win_over_heading_fallback(self, make_page) -> None:
        page = make_page(CONTAINER_AND_HEADING_PAGE, url="https://portal.example.org/notices")

        items = GenericExtractor().extract_items(page)

        assert len(items) == 1
        item = items[0]
        assert item.title == "Ministry announces new scholarship scheme"
        assert item.content == "Students from rural districts can apply online before the end of July."
        assert item.url == "https://portal.example.org/news/scholarship-2024"
        assert item.type == "article"
        assert item.metadata["image_url"] == "https://portal.example.org/img/scholarship.png"

    def test_heading_fallback_skips_navigation_regions_and_text(self, make_page) -> None:
        page = make_page(HEADINGS_ONLY_PAGE, url="https://city.example.org/updates")

        items = GenericExtractor().extract_items(page)

        assert [item.title for item in items] == ["Water supply interruption in Ward 12 on Friday"]
        assert items[0].type == "content"
        assert items[0].content.startswith("Supply will be suspended")
        assert items[0].url == "https://city.example.org/updates"

    def test_metadata_titles_are_filtered(self, make_page) -> None:
        html = """
        <div class="post"><h3>12 points by alice</h3><p>Some text that is long enough to count.</p></div>
        <div class="post"><h3>Budget session schedule released</h3><p>The session begins on the first Monday of February.</p></div>
        """

        items = GenericExtractor().extract_items(make_page(html))

        assert [item.title for item in items] == ["Budget session schedule released"]

    def test_content_is_truncated(self, make_page) -> None:
        body = "word " * 400
        html = f"<article><h2>Lengthy circular on procurement rules</h2><p>{body}</p></article>"

        items = GenericExtractor().extract_items(make_page(html))

        assert len(items[0].content) == 1000

    def test_fallback_content_is_truncated(self, make_page) -> None:
        body = "detail " * 200
        html = f"<h2>Detailed advisory for heatwave season</h2><p>{body}</p>"

        items = GenericExtractor().extract_items(make_page(html))

        assert len(items[0].content) <= 500


class TestSiteExtractors:
    def test_hacker_news_rows(self, make_page) -> None:
        page = make_page(HACKER_NEWS_PAGE, url="https://news.ycombinator.com/")

        result = ContentExtractor().extract(page)

        assert len(result.items) == 1
        story = result.items[0]
        assert story.title == "Show HN: A civic notice tracker"
        assert story.type == "news"
        assert story.url == "https://example.com/story"
        assert story.content == "42 points by alice 3 hours ago | 10 comments"
        assert story.metadata == {
            "score": "42 points",
            "author": "alice",
            "age": "3 hours ago",
            "comments": "10 comments",
        }

    def test_hacker_news_row_limit(self, make_page) -> None:
        rows = "".join(
            f'<tr class="athing"><td><span class="titleline"><a href="item?id={i}">Story number {i} about cities</a></span></td></tr>'
            for i in range(40)
        )
        page = make_page(f"<table>{rows}</table>", url="https://news.ycombinator.com/news")

        result = ContentExtractor().extract(page)

        assert len(result.items) == 30

    def test_books_products(self, make_page) -> None:
        page = make_page(BOOKS_PAGE, url="https://books.toscrape.com/index.html")

        result = ContentExtractor().extract(page)

        assert len(result.items) == 1
        book = result.items[0]
        assert book.title == "A Light in the Attic"
        assert book.type == "product"
        assert book.content == "Price: £51.77, Rating: Three"
        assert book.url == "https://books.toscrape.com/catalogue/a-light-in-the-attic_1000/index.html"
        assert book.metadata["image_url"] == "https://books.toscrape.com/media/cache/attic.jpg"


class TestExtractorRegistry:
    def test_resolves_in_registration_order_with_generic_fallback(self) -> None:
        class PortalExtractor(HostnameExtractor):
            name = "portal"
            hostname_pattern = "portal.example.org"

            def extract_items(self, page: PageModel) -> list[ExtractedItem]:
                return [ExtractedItem(title="Portal notice", content="", url=page.url)]

        registry = ExtractorRegistry()
        registry.register(PortalExtractor())

        assert registry.resolve("portal.example.org").name == "portal"
        assert registry.resolve("news.ycombinator.com").name == "hacker_news"
        assert registry.resolve("unknown.example.net").name == "generic"

    def test_custom_strategy_replaces_generic_for_its_host(self, make_page) -> None:
        class PortalExtractor(HostnameExtractor):
            name = "portal"
            hostname_pattern = "portal.example.org"

            def extract_items(self, page: PageModel) -> list[ExtractedItem]:
                return [ExtractedItem(title="Portal notice", content="", url=page.url)]

        extractor = ContentExtractor(ExtractorRegistry([PortalExtractor()]))
        page = make_page(CONTAINER_AND_HEADING_PAGE, url="https://portal.example.org/")

        assert [item.title for item in extractor.extract(page).items] == ["Portal notice"]

    @pytest.mark.parametrize(
        "path",
        ["no_colon_here", "civicsphere.crawling.types:DoesNotExist", "civicsphere.crawling.types:CrawlJob"],
    )
    def test_register_path_rejects_invalid_classes(self, path: str) -> None:
        with pytest.raises(ValueError):
            ExtractorRegistry().register_path(path)

    def test_register_path_loads_extractor_class(self) -> None:
        registry = ExtractorRegistry(extractors=[])
        registry.register_path("civicsphere.crawling.extraction.sites:BooksToScrapeExtractor")

        assert registry.resolve("books.toscrape.com").name == "books_to_scrape"


def test_discover_links_filters_and_deduplicates(make_page) -> None:
    html = """
    <header><a href="/news/header-link">Header story</a></header>
    <main>
      <a href="/news/1">Flood relief update</a>
      <a href="news/2">Relative notice</a>
      <a href="/news/1">Flood relief update again</a>
      <a href="#top">Back to top</a>
      <a href="mailto:desk@example.org">Write to us</a>
      <a href="tel:+100">Call</a>
      <a href="javascript:void(0)">Open</a>
      <a href="/policies/privacy">Privacy policy</a>
      <a href="https://twitter.com/example">Follow on Twitter</a>
      <a href="ftp://files.example.org/archive">Archive</a>
    </main>
    <footer><a href="/news/footer-link">Footer story</a></footer>
    """

    links = discover_links(make_page(html, url="https://example.org/section/index.html"))

    assert links == [
        "https://example.org/news/1",
        "https://example.org/section/news/2",
    ]


def test_extract_returns_items_and_links(make_page) -> None:
    page = make_page(CONTAINER_AND_HEADING_PAGE, url="https://portal.example.org/notices")

    result = ContentExtractor().extract(page)

    assert len(result.items) == 1
    assert result.links == ["https://portal.example.org/news/scholarship-2024"]
