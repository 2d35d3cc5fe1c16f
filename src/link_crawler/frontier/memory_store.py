"""In-memory frontier store."""

from __future__ import annotations

import heapq
import itertools
import logging

from link_crawler.domain.model import FrontierEntry


logger = logging.getLogger(__name__)


class InMemoryFrontierStore:
    """Frontier, visited set and results held in process memory.

    Uses a heap keyed on ``(priority, insertion order)`` so equal priorities
    pop first-in first-out, and dicts/sets for O(1) membership checks.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[int, int, str]] = []
        self._counter = itertools.count()
        self._queued: dict[str, FrontierEntry] = {}
        self._visited: set[str] = set()
        self._results: list[str] = []

    def exists_in_frontier_or_visited(self, url: str) -> bool:
        return url in self._queued or url in self._visited

    def enqueue(self, priority: int, url: str, *, discovered_from: str | None = None) -> None:
        if self.exists_in_frontier_or_visited(url):
            return
        entry = FrontierEntry(url=url, priority=priority, discovered_from=discovered_from)
        self._queued[url] = entry
        heapq.heappush(self._heap, (priority, next(self._counter), url))

    def mark_visited(self, url: str) -> None:
        self._queued.pop(url, None)
        self._visited.add(url)

    def next_url(self) -> str:
        while self._heap:
            _priority, _seq, url = heapq.heappop(self._heap)
            # Entries removed by mark_visited leave stale heap slots behind
            if self._queued.pop(url, None) is not None:
                return url
        return ""

    def record_match(self, url: str) -> None:
        self._results.append(url)

    def drain_results(self) -> list[str]:
        results, self._results = self._results, []
        return results

    # Inspection helpers used by tests and the CLI summary

    def queue_depth(self) -> int:
        return len(self._queued)

    def visited_count(self) -> int:
        return len(self._visited)

    def queued_entries(self) -> list[FrontierEntry]:
        return sorted(self._queued.values(), key=lambda entry: entry.priority)

    def is_visited(self, url: str) -> bool:
        return url in self._visited
