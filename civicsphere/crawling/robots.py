"""
robots.txt policy and politeness delay for one crawl invocation.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from urllib.parse import urlparse

import requests

from civicsphere.config import CrawlerSettings
from civicsphere.crawling.logging_utils import log_event
from civicsphere.crawling.types import RobotsCheck

logger = logging.getLogger(__name__)


@dataclass
class RobotsRules:
    """
    Directives from the robots.txt sections that apply to this crawler.
    """

    disallowed_paths: list[str] = field(default_factory=list)
    crawl_delay_ms: int | None = None

    def allows(self, url: str) -> bool:
        parsed = urlparse(url)
        target = parsed.path or "/"
        if parsed.query:
            target = f"{target}?{parsed.query}"
        for path in self.disallowed_paths:
            if path == "/" or path in target:
                return False
        return True


def parse_robots_txt(text: str, *, agent_token: str) -> RobotsRules:
    """
    Collect Disallow and Crawl-delay directives from relevant sections.

    A section is relevant when its User-agent is `*`, this crawler's token,
    or any agent containing "bot".
    """

    rules = RobotsRules()
    relevant = False
    for raw_line in text.splitlines():
        line = raw_line.split("#", 1)[0].strip()
        if ":" not in line:
            continue
        directive, _, value = line.partition(":")
        directive = directive.strip().lower()
        value = value.strip()

        if directive == "user-agent":
            agent = value.lower()
            relevant = agent == "*" or agent == agent_token or "bot" in agent
        elif not relevant:
            continue
        elif directive == "disallow":
            if value:
                rules.disallowed_paths.append(value)
        elif directive == "crawl-delay":
            try:
                delay_ms = int(float(value) * 1000)
            except ValueError:
                continue
            if rules.crawl_delay_ms is None or delay_ms > rules.crawl_delay_ms:
                rules.crawl_delay_ms = delay_ms
    return rules


class PolitenessGuard:
    """
    Caches robots.txt rules per hostname and computes crawl delays.

    One guard belongs to one crawl invocation; its cache is never shared.
    """

    def __init__(
        self,
        *,
        settings: CrawlerSettings,
        session: requests.Session,
        on_check: Callable[[RobotsCheck], None] | None = None,
    ) -> None:
        self._settings = settings
        self._session = session
        self._on_check = on_check
        self._cache: dict[str, RobotsRules] = {}
        self._reported: set[str] = set()

    def check_robots(self, url: str) -> bool:
        """
        Return whether robots.txt allows fetching `url`.
        """

        parsed = urlparse(url)
        hostname = (parsed.hostname or "").lower()
        if not hostname:
            return False

        cached = self._cache.get(hostname)
        if cached is not None:
            return cached.allows(url)

        rules = self._load_rules(scheme=parsed.scheme or "https", hostname=hostname)
        allowed = rules.allows(url)
        # Only the first check per host is reported, even when robots.txt was unreachable.
        if hostname in self._reported:
            return allowed
        self._reported.add(hostname)
        if self._on_check is not None:
            self._on_check(RobotsCheck(domain=hostname, allowed=allowed))
        log_event(
            logger,
            logging.INFO,
            "robots_checked",
            hostname=hostname,
            url=url,
            allowed=allowed,
        )
        return allowed

    def determine_delay(self, hostname: str, *, override: int | None = None) -> int:
        """
        Return the politeness delay in milliseconds for `hostname`.
        """

        if override is not None:
            return max(0, override)

        normalized = hostname.lower()
        if self.is_government_host(normalized, self._settings.government_domains):
            delay_ms = self._settings.government_delay_ms
            log_event(logger, logging.INFO, "government_domain_detected", hostname=normalized)
        else:
            delay_ms = self._settings.regular_delay_ms

        rules = self._cache.get(normalized)
        if rules is not None and rules.crawl_delay_ms is not None and rules.crawl_delay_ms > delay_ms:
            log_event(
                logger,
                logging.INFO,
                "crawl_delay_adjusted",
                hostname=normalized,
                delay_ms=rules.crawl_delay_ms,
            )
            delay_ms = rules.crawl_delay_ms
        return delay_ms

    @staticmethod
    def is_government_host(hostname: str, government_domains: Iterable[str]) -> bool:
        return any(domain in hostname for domain in government_domains)

    def _load_rules(self, *, scheme: str, hostname: str) -> RobotsRules:
        robots_url = f"{scheme}://{hostname}/robots.txt"
        try:
            response = self._session.get(
                robots_url,
                headers={"User-Agent": self._settings.user_agent},
                timeout=self._settings.robots_timeout_seconds,
            )
        except requests.RequestException as exc:
            log_event(
                logger,
                logging.WARNING,
                "robots_fetch_failed",
                hostname=hostname,
                robots_url=robots_url,
                error=str(exc),
            )
            return RobotsRules()

        if not response.ok:
            log_event(
                logger,
                logging.WARNING,
                "robots_unavailable",
                hostname=hostname,
                robots_url=robots_url,
                status_code=response.status_code,
            )
            rules = RobotsRules()
        else:
            rules = parse_robots_txt(response.text or "", agent_token=self._settings.agent_token)
            log_event(
                logger,
                logging.INFO,
                "robots_loaded",
                hostname=hostname,
                robots_url=robots_url,
                disallowed_paths=len(rules.disallowed_paths),
                crawl_delay_ms=rules.crawl_delay_ms,
            )

        self._cache[hostname] = rules
        return rules
