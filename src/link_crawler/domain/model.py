"""Domain model - value objects and per-document parse state.

The domain layer carries no infrastructure: no HTTP clients, no database
drivers. Value objects are immutable Pydantic dataclasses so invalid values are
rejected at construction.
"""

from __future__ import annotations

from dataclasses import dataclass as std_dataclass

from pydantic import Field
from pydantic.dataclasses import dataclass


DEFAULT_MAX_LINKS = 100
DEFAULT_MAX_DEPTH = 2


@dataclass(frozen=True)
class FrontierEntry:
    """A discovered URL waiting in the frontier.

    ``priority`` is the crawl iteration at which the link was found. It only
    approximates traversal depth and is never used as a strict schedule.
    """

    url: str = Field(min_length=1)
    priority: int = Field(default=0, ge=0)
    discovered_from: str | None = None


@dataclass(frozen=True)
class CrawlLimits:
    """Traversal bounds for one orchestrator instance.

    Use :meth:`from_overrides` to build limits from user input: a missing or
    non-positive override is ignored and the default retained.
    """

    max_links: int = Field(default=DEFAULT_MAX_LINKS, ge=1)
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1)

    @classmethod
    def from_overrides(cls, max_links: int | None = None, max_depth: int | None = None) -> CrawlLimits:
        links = max_links if max_links is not None and max_links > 0 else DEFAULT_MAX_LINKS
        depth = max_depth if max_depth is not None and max_depth > 0 else DEFAULT_MAX_DEPTH
        return cls(max_links=links, max_depth=depth)

    def exceeded(self, *, priority: int, links_processed: int) -> bool:
        """True once either bound has been passed."""
        return priority > self.max_depth or links_processed > self.max_links


@std_dataclass
class ParserState:
    """Mutable state for a single document parse.

    Created fresh for every document and dropped when extraction returns.
    """

    body_reached: bool = False
    base_url: str | None = None

    def mark_body_reached(self) -> None:
        # One-way transition for the rest of the document
        self.body_reached = True

    def accepts_base(self) -> bool:
        return not self.body_reached

    def set_base(self, url: str) -> bool:
        """Record ``url`` as the document base; ignored once the body began."""
        if not self.accepts_base():
            return False
        self.base_url = url
        return True

    def can_resolve_relative(self) -> bool:
        return self.base_url is not None and self.body_reached
