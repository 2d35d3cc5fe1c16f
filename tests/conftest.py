"""Shared test fixtures and configuration."""

from __future__ import annotations

import io
import os
from pathlib import Path
import sys

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))


# Complete test environment that overrides every config value
TEST_ENV = {
    "MAX_LINKS": "100",
    "MAX_DEPTH": "2",
    "HTTP_TIMEOUT": "5",
    "MAX_RETRIES": "0",
    "CHUNK_SIZE": "4096",
    "STATE_DB_PATH": "",
    "SEARCH_TERMS": "",
    "LOG_LEVEL": "info",
    "LOG_JSON": "true",
    # Proxy settings - ensure they're cleared for tests
    "http_proxy": "",
    "https_proxy": "",
    "all_proxy": "",
    "no_proxy": "",
}


# Set environment variables immediately when conftest.py is loaded
for key, value in TEST_ENV.items():
    os.environ[key] = value

from link_crawler.domain.errors import StreamIOError  # noqa: E402
from link_crawler.frontier import InMemoryFrontierStore  # noqa: E402


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset crawler environment variables before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)


class TrackingStream(io.BytesIO):
    """BytesIO that remembers how often it was closed."""

    def __init__(self, data: bytes = b"") -> None:
        super().__init__(data)
        self.close_calls = 0

    def close(self) -> None:
        self.close_calls += 1
        super().close()


class FlakyStream:
    """Serves ``data`` on the first read, then fails like a dropped connection."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._served = False
        self.closed = False

    def read(self, size: int = -1, /) -> bytes:
        if not self._served:
            self._served = True
            return self._data
        raise OSError("connection reset by peer")

    def close(self) -> None:
        self.closed = True


class FakeFetcher:
    """Serves canned pages; unknown URLs fail like an HTTP 404."""

    def __init__(self, pages: dict[str, bytes | str | Exception] | None = None) -> None:
        self.pages = dict(pages or {})
        self.opened: list[str] = []
        self.streams: list[TrackingStream] = []

    def open_stream(self, url: str) -> TrackingStream:
        self.opened.append(url)
        page = self.pages.get(url)
        if page is None:
            raise StreamIOError(url, "HTTP 404")
        if isinstance(page, Exception):
            raise page
        data = page.encode("utf-8") if isinstance(page, str) else page
        stream = TrackingStream(data)
        self.streams.append(stream)
        return stream


@pytest.fixture
def make_stream():
    """Build an in-memory byte stream from text or bytes."""

    def _make(content: str | bytes) -> TrackingStream:
        data = content.encode("utf-8") if isinstance(content, str) else content
        return TrackingStream(data)

    return _make


@pytest.fixture
def flaky_stream_factory():
    return FlakyStream


@pytest.fixture
def fake_fetcher_factory():
    return FakeFetcher


@pytest.fixture
def memory_store() -> InMemoryFrontierStore:
    return InMemoryFrontierStore()
