"""Error kinds raised by the crawler components.

None of these are fatal to the crawl loop: the orchestrator logs them and moves
on to the next frontier item. Only the bound conditions stop a crawl.
"""

from __future__ import annotations


class CrawlerError(Exception):
    """Base class for crawler failures."""


class MalformedURLError(CrawlerError, ValueError):
    """URL text cannot be parsed into a usable URL."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Malformed URL {url!r}{detail}")


class StreamIOError(CrawlerError):
    """Fetching a URL or reading its byte stream failed."""

    def __init__(self, url: str, reason: str = "") -> None:
        self.url = url
        self.reason = reason
        detail = f": {reason}" if reason else ""
        super().__init__(f"Stream error for {url!r}{detail}")


class AttributeNotFoundError(CrawlerError):
    """No ``href=`` attribute was found before the stream ran out."""
