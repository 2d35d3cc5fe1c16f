"""Frontier stores: the queue, visited set and result set behind one protocol."""

from link_crawler.frontier.memory_store import InMemoryFrontierStore
from link_crawler.frontier.protocol import FrontierStore
from link_crawler.frontier.sqlite_store import DatabaseCriticalError, SqliteFrontierStore


__all__ = [
    "DatabaseCriticalError",
    "FrontierStore",
    "InMemoryFrontierStore",
    "SqliteFrontierStore",
]
