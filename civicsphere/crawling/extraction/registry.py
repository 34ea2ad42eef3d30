"""
Hostname-ordered extractor registry and the page-level content extractor.
"""

from __future__ import annotations

import importlib
import logging
from collections.abc import Iterable

from civicsphere.crawling.extraction.base import MAX_ITEMS_PER_PAGE, SiteExtractor
from civicsphere.crawling.extraction.generic import GenericExtractor
from civicsphere.crawling.extraction.links import discover_links
from civicsphere.crawling.extraction.sites import BooksToScrapeExtractor, HackerNewsExtractor
from civicsphere.crawling.logging_utils import log_event
from civicsphere.crawling.types import ExtractionResult, PageModel

logger = logging.getLogger(__name__)


class ExtractorRegistry:
    """
    Ordered site strategies with a mandatory generic fallback.
    """

    def __init__(
        self,
        extractors: Iterable[SiteExtractor] | None = None,
        *,
        fallback: SiteExtractor | None = None,
    ) -> None:
        if extractors is None:
            extractors = (HackerNewsExtractor(), BooksToScrapeExtractor())
        self._extractors: list[SiteExtractor] = list(extractors)
        self._fallback = fallback or GenericExtractor()

    def register(self, extractor: SiteExtractor) -> None:
        self._extractors.append(extractor)

    def register_path(self, path: str) -> None:
        """
        Register an extractor class given as `module.path:ClassName`.
        """

        self.register(self._load_dynamic_class(path)())

    def resolve(self, hostname: str) -> SiteExtractor:
        normalized = hostname.lower()
        for extractor in self._extractors:
            if extractor.matches(normalized):
                return extractor
        return self._fallback

    @staticmethod
    def _load_dynamic_class(path: str) -> type[SiteExtractor]:
        if ":" not in path:
            raise ValueError(f"Invalid extractor path '{path}'. Use 'module.path:ClassName'.")

        module_path, class_name = path.split(":", 1)
        module = importlib.import_module(module_path)
        loaded = getattr(module, class_name, None)
        if loaded is None:
            raise ValueError(f"Unable to resolve extractor class '{path}'.")
        if not isinstance(loaded, type) or not issubclass(loaded, SiteExtractor):
            raise ValueError(f"Class '{path}' must inherit from SiteExtractor.")
        return loaded


class ContentExtractor:
    """
    Produces candidate items and outbound links for one fetched page.
    """

    def __init__(self, registry: ExtractorRegistry | None = None) -> None:
        self._registry = registry or ExtractorRegistry()

    @classmethod
    def from_paths(cls, paths: Iterable[str]) -> "ContentExtractor":
        registry = ExtractorRegistry()
        for path in paths:
            registry.register_path(path)
        return cls(registry)

    def extract(self, page: PageModel) -> ExtractionResult:
        strategy = self._registry.resolve(page.hostname)
        items = strategy.extract_items(page)[:MAX_ITEMS_PER_PAGE]
        links = discover_links(page)
        log_event(
            logger,
            logging.DEBUG,
            "page_extracted",
            url=page.url,
            strategy=strategy.name,
            items=len(items),
            links=len(links),
        )
        return ExtractionResult(items=items, links=links)
