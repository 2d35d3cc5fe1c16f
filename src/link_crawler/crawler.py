"""Frontier-driven crawl loop.

The orchestrator pops URLs from a :class:`FrontierStore`, streams each page
through the :class:`LinkExtractor`, queues links it has not seen, and records
pages accepted by the match predicate. It is single-threaded: each page is
fetched, parsed, queued and marked visited before the next pop.

``priority`` advances once per loop iteration, alongside ``links_processed``.
It is a coarse count of frontier pops rather than true breadth-first depth, so
``max_depth`` and ``max_links`` bound the same counter under default stepping.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
import time
from typing import Protocol

from link_crawler.domain.errors import MalformedURLError, StreamIOError
from link_crawler.domain.model import CrawlLimits
from link_crawler.extraction.link_extractor import LinkExtractor
from link_crawler.extraction.stream_scanner import ByteStream
from link_crawler.frontier.protocol import FrontierStore
from link_crawler.matching import MatchPredicate, url_contains_any_term
from link_crawler.observability.context import crawl_scope, update_current_url
from link_crawler.utils.url_tools import validate_url


logger = logging.getLogger(__name__)


class StreamOpener(Protocol):
    """Fetch primitive: anything that can open a byte stream for a URL."""

    def open_stream(self, url: str) -> ByteStream:  # pragma: no cover - Protocol only
        """Open ``url``; raise MalformedURLError or StreamIOError on failure."""


@dataclass
class CrawlStats:
    """Counters for a single crawl run."""

    iterations: int = 0
    pages_fetched: int = 0
    fetch_failures: int = 0
    malformed_urls: int = 0
    links_extracted: int = 0
    links_enqueued: int = 0
    matches: int = 0

    def as_dict(self) -> dict[str, int]:
        return dict(self.__dict__)


class CrawlOrchestrator:
    """Drive a bounded crawl from a seed URL.

    Args:
        store: Frontier, visited set and result set.
        fetcher: Opens byte streams for URLs.
        extractor: Link extractor; a default one is created when omitted.
        predicate: Match predicate applied to each fetched page URL.
        search_terms: Terms handed to the predicate.
        max_links: Override for the link bound; non-positive values are ignored.
        max_depth: Override for the depth bound; non-positive values are ignored.
        limits: Ready-made limits, taking precedence over the two overrides.
    """

    def __init__(
        self,
        store: FrontierStore,
        fetcher: StreamOpener,
        *,
        extractor: LinkExtractor | None = None,
        predicate: MatchPredicate = url_contains_any_term,
        search_terms: Sequence[str] = (),
        max_links: int | None = None,
        max_depth: int | None = None,
        limits: CrawlLimits | None = None,
    ) -> None:
        self.store = store
        self.fetcher = fetcher
        self.extractor = extractor or LinkExtractor()
        self.predicate = predicate
        self.search_terms: tuple[str, ...] = tuple(search_terms)
        self.limits = limits or CrawlLimits.from_overrides(max_links, max_depth)
        self.stats = CrawlStats()

    @property
    def max_links(self) -> int:
        return self.limits.max_links

    @property
    def max_depth(self) -> int:
        return self.limits.max_depth

    def matches(self, url: str) -> bool:
        """Apply the match predicate; subclasses may override."""
        return self.predicate(url, self.search_terms)

    def crawl(self, start_url: str) -> list[str]:
        """Crawl from ``start_url`` and return matching URLs in match order."""
        self.stats = CrawlStats()
        cursor = start_url
        links_processed = 0
        priority = 0

        with crawl_scope(seed=start_url) as crawl_id:
            logger.info(
                f"Starting crawl {crawl_id} from {start_url} "
                f"(max_links={self.max_links}, max_depth={self.max_depth})"
            )
            start_time = time.time()

            while True:
                update_current_url(cursor)
                self._process(cursor, priority)
                if cursor:
                    self.store.mark_visited(cursor)

                cursor = self.store.next_url()
                links_processed += 1
                priority += 1
                self.stats.iterations += 1

                if self.limits.exceeded(priority=priority, links_processed=links_processed):
                    logger.info(f"Crawl bounds reached (priority={priority}, links_processed={links_processed})")
                    break
                if not cursor:
                    logger.info("Frontier exhausted")
                    break

            results = self.store.drain_results()
            self._log_completion(start_time, len(results))
        return results

    def _process(self, url: str, priority: int) -> None:
        """Fetch, extract, queue and match one frontier item."""
        if not url:
            return
        try:
            validate_url(url)
        except MalformedURLError as exc:
            self.stats.malformed_urls += 1
            logger.warning(f"Skipping malformed URL: {exc}")
            return
        if self.store.exists_in_frontier_or_visited(url):
            logger.debug(f"Skipping already seen: {url}")
            return

        self._fetch_and_enqueue(url, priority)
        # Matching looks at the URL only, so it runs even when the fetch failed
        self._record_if_match(url)

    def _fetch_and_enqueue(self, url: str, priority: int) -> None:
        try:
            stream = self.fetcher.open_stream(url)
        except MalformedURLError as exc:
            self.stats.malformed_urls += 1
            logger.warning(f"Failed to open {url}: {exc}")
            return
        except StreamIOError as exc:
            self.stats.fetch_failures += 1
            logger.warning(f"Failed to open {url}: {exc}")
            return

        try:
            links = self.extractor.create_list(url, stream)
        finally:
            stream.close()
        self.stats.pages_fetched += 1
        self.stats.links_extracted += len(links)

        queued = self._enqueue_new(links, discovered_from=url, priority=priority)
        logger.info(f"Queued {queued} new links from {url} ({len(links)} found)")

    def _record_if_match(self, url: str) -> None:
        if self.matches(url):
            self.store.record_match(url)
            self.stats.matches += 1
            logger.debug(f"Matched: {url}")

    def _enqueue_new(self, links: Sequence[str], *, discovered_from: str, priority: int) -> int:
        queued = 0
        for link in links:
            if self.store.exists_in_frontier_or_visited(link):
                continue
            self.store.enqueue(priority, link, discovered_from=discovered_from)
            queued += 1
        self.stats.links_enqueued += queued
        return queued

    def _log_completion(self, start_time: float, result_count: int) -> None:
        elapsed = time.time() - start_time
        logger.info(
            f"Crawl complete: {self.stats.pages_fetched} pages fetched, "
            f"{self.stats.fetch_failures} failures, {result_count} matches "
            f"in {self.stats.iterations} iterations ({elapsed:.1f}s)"
        )
