"""Crawl context propagation for log correlation."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from uuid import uuid4


crawl_context: ContextVar[dict | None] = ContextVar("crawl_context", default=None)


def generate_crawl_id() -> str:
    """Generate a 16-char hex crawl ID."""
    return uuid4().hex[:16]


def get_crawl_context() -> dict:
    """Get the current crawl context (empty dict outside a crawl)."""
    return dict(crawl_context.get() or {})


def set_crawl_context(crawl_id: str, **extra: object) -> None:
    crawl_context.set({"crawl_id": crawl_id, **extra})


def update_current_url(url: str) -> None:
    """Update current_url while preserving crawl_id."""
    ctx = crawl_context.get() or {}
    crawl_context.set({**ctx, "current_url": url})


@contextmanager
def crawl_scope(crawl_id: str | None = None, **extra: object) -> Iterator[str]:
    """Bind a crawl id for the duration of the block and restore the previous context after."""
    active_id = crawl_id or generate_crawl_id()
    token = crawl_context.set({"crawl_id": active_id, **extra})
    try:
        yield active_id
    finally:
        crawl_context.reset(token)
