"""Domain layer - pure crawl concepts with no infrastructure dependencies.

- Value objects: FrontierEntry, CrawlLimits
- Per-document state: ParserState
- Error kinds shared by the extractor, fetcher, and orchestrator
"""

from link_crawler.domain.errors import AttributeNotFoundError, CrawlerError, MalformedURLError, StreamIOError
from link_crawler.domain.model import (
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_LINKS,
    CrawlLimits,
    FrontierEntry,
    ParserState,
)


__all__ = [
    "DEFAULT_MAX_DEPTH",
    "DEFAULT_MAX_LINKS",
    "AttributeNotFoundError",
    "CrawlLimits",
    "CrawlerError",
    "FrontierEntry",
    "MalformedURLError",
    "ParserState",
    "StreamIOError",
]
