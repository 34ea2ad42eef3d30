"""
Run the notice crawl pipeline from CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys

from pydantic import ValidationError

from civicsphere.config import get_crawler_settings
from civicsphere.crawling import CapabilityUnavailable, CrawlOrchestrator, PolicyViolation
from civicsphere.schemas import CrawlRequest, CrawlRunResponse, CrawlStatsResponse
from civicsphere.services import NoticePipelineService


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        stream=sys.stderr,
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Crawl a site and extract notices.")
    parser.add_argument("url", help="Start URL (absolute http/https).")
    parser.add_argument("--max-depth", type=int, default=2)
    parser.add_argument("--max-pages", type=int, default=20)
    parser.add_argument(
        "--allowed-domain",
        dest="allowed_domains",
        action="append",
        default=[],
        help="Extra hostname to crawl besides the start URL's host. Repeatable.",
    )
    parser.add_argument("--delay-ms", type=int, default=None, help="Override the politeness delay.")
    parser.add_argument(
        "--skip-processing",
        action="store_true",
        help="Print raw extracted items without categorization or summaries.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging()

    try:
        request = CrawlRequest(
            url=args.url,
            max_depth=args.max_depth,
            max_pages=args.max_pages,
            allowed_domains=args.allowed_domains,
            delay_ms=args.delay_ms,
        )
    except ValidationError as exc:
        print(json.dumps({"error": "invalid_request", "detail": exc.errors()}, default=str, indent=2))
        return 1

    try:
        if args.skip_processing:
            orchestrator = CrawlOrchestrator(settings=get_crawler_settings())
            result = orchestrator.crawl(request.url, request.to_options())
            payload = {
                "items": [item.to_dict() for item in result.items],
                "crawl_stats": CrawlStatsResponse.from_stats(result.stats).model_dump(),
            }
        else:
            pipeline_result = NoticePipelineService().run(request)
            payload = CrawlRunResponse.from_result(pipeline_result).model_dump()
    except PolicyViolation as exc:
        print(json.dumps({"error": "policy_violation", "detail": str(exc)}, indent=2))
        return 2
    except CapabilityUnavailable as exc:
        print(json.dumps({"error": "capability_unavailable", "detail": str(exc)}, indent=2))
        return 3

    print(json.dumps(payload, indent=2, default=str))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
