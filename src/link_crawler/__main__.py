"""Command-line entry point.

Usage:
    # Crawl with default bounds, recording URLs that contain "docs"
    python -m link_crawler https://example.com/ --term docs

    # Tighter bounds and a persistent frontier that can be resumed later
    python -m link_crawler https://example.com/ --max-links 20 --max-depth 5 --state-db crawl.sqlite

    # Continue a previous crawl from the saved frontier
    python -m link_crawler https://example.com/ --state-db crawl.sqlite --resume
"""

from __future__ import annotations

import argparse
import logging
import sys

from link_crawler.config import Settings
from link_crawler.crawler import CrawlOrchestrator
from link_crawler.extraction import LinkExtractor
from link_crawler.frontier import FrontierStore, InMemoryFrontierStore, SqliteFrontierStore
from link_crawler.matching import PREDICATES
from link_crawler.observability import configure_logging
from link_crawler.utils.stream_fetcher import StreamFetcher


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="link-crawler",
        description="Crawl from a seed URL and print pages whose URL matches the search terms.",
    )
    parser.add_argument("seed", help="Seed URL (http, https or file)")
    parser.add_argument("--max-links", type=int, default=None, help="Maximum frontier pops (non-positive: default)")
    parser.add_argument("--max-depth", type=int, default=None, help="Maximum priority reached (non-positive: default)")
    parser.add_argument(
        "--term",
        dest="terms",
        action="append",
        default=None,
        help="Search term a matching URL must contain (repeatable)",
    )
    parser.add_argument(
        "--match",
        choices=sorted(PREDICATES),
        default=None,
        help="How terms combine: any, all, or every (record all pages). Defaults to any, or every without terms",
    )
    parser.add_argument("--state-db", default=None, help="SQLite file for a persistent frontier")
    parser.add_argument("--resume", action="store_true", help="Keep the saved frontier instead of clearing it")
    parser.add_argument("--timeout", type=int, default=None, help="HTTP timeout in seconds")
    parser.add_argument("--log-level", default=None, help="Logging level (debug, info, warning, ...)")
    parser.add_argument("--plain-logs", action="store_true", help="Human-readable logs instead of JSON")
    return parser


def build_settings(args: argparse.Namespace) -> Settings:
    overrides: dict[str, object] = {}
    if args.max_links is not None:
        overrides["max_links"] = args.max_links
    if args.max_depth is not None:
        overrides["max_depth"] = args.max_depth
    if args.terms:
        overrides["search_terms"] = ",".join(args.terms)
    if args.state_db is not None:
        overrides["state_db_path"] = args.state_db
    if args.timeout is not None:
        overrides["http_timeout"] = args.timeout
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.plain_logs:
        overrides["log_json"] = False
    return Settings(**overrides)


def build_store(settings: Settings, *, resume: bool = False) -> FrontierStore:
    if not settings.state_db_path:
        return InMemoryFrontierStore()
    store = SqliteFrontierStore(settings.state_db_path)
    if not resume:
        store.clear()
    return store


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = build_settings(args)
    configure_logging(settings.log_level, settings.log_json)

    terms = settings.get_search_terms()
    mode = args.match or ("any" if terms else "every")
    store = build_store(settings, resume=args.resume)

    with StreamFetcher(settings) as fetcher:
        orchestrator = CrawlOrchestrator(
            store,
            fetcher,
            extractor=LinkExtractor(chunk_size=settings.chunk_size),
            predicate=PREDICATES[mode],
            search_terms=terms,
            limits=settings.to_limits(),
        )
        results = orchestrator.crawl(args.seed)

    for url in results:
        print(url)
    logger.info("Crawl stats: %s", orchestrator.stats.as_dict())
    return 0


if __name__ == "__main__":
    sys.exit(main())
