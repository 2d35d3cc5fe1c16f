"""Observability module: structured logging with crawl correlation."""

from link_crawler.observability.context import (
    crawl_context,
    crawl_scope,
    get_crawl_context,
    set_crawl_context,
    update_current_url,
)
from link_crawler.observability.logging import JsonFormatter, configure_logging


__all__ = [
    "JsonFormatter",
    "configure_logging",
    "crawl_context",
    "crawl_scope",
    "get_crawl_context",
    "set_crawl_context",
    "update_current_url",
]
