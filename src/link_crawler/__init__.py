"""Single-threaded web crawler with a streaming hyperlink extractor."""

from link_crawler.crawler import CrawlOrchestrator, CrawlStats
from link_crawler.extraction import LinkExtractor
from link_crawler.frontier import FrontierStore, InMemoryFrontierStore, SqliteFrontierStore


__version__ = "0.1.0"

__all__ = [
    "CrawlOrchestrator",
    "CrawlStats",
    "FrontierStore",
    "InMemoryFrontierStore",
    "LinkExtractor",
    "SqliteFrontierStore",
    "__version__",
]
