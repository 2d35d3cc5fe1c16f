"""Capability interface for the frontier, visited set, and result set."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FrontierStore(Protocol):
    """Storage surface consumed by the crawl orchestrator.

    One orchestrator owns a store for the duration of a crawl; implementations
    are not required to be safe for concurrent crawls.
    """

    def exists_in_frontier_or_visited(self, url: str) -> bool:  # pragma: no cover - Protocol only
        """Return True if ``url`` is queued or already visited."""

    def enqueue(self, priority: int, url: str, *, discovered_from: str | None = None) -> None:  # pragma: no cover
        """Queue ``url`` with ``priority``; a URL already queued or visited is left alone."""

    def mark_visited(self, url: str) -> None:  # pragma: no cover - Protocol only
        """Record ``url`` as processed and drop it from the queue."""

    def next_url(self) -> str:  # pragma: no cover - Protocol only
        """Pop the next queued URL (lowest priority, then oldest); ``""`` when empty."""

    def record_match(self, url: str) -> None:  # pragma: no cover - Protocol only
        """Append ``url`` to the result set."""

    def drain_results(self) -> list[str]:  # pragma: no cover - Protocol only
        """Return recorded matches in order and clear them."""
