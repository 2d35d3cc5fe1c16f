"""Open byte streams for crawl URLs.

``http``/``https`` URLs are fetched with a blocking ``httpx.Client`` in
streaming mode, so the extractor reads the body as it arrives instead of after
the whole document has been downloaded. ``file`` URLs are opened from disk.
"""

from __future__ import annotations

from collections.abc import Iterator
import logging
from pathlib import Path
from urllib.parse import urlparse
from urllib.request import url2pathname

import httpx

from link_crawler.config import Settings
from link_crawler.domain.errors import MalformedURLError, StreamIOError
from link_crawler.extraction.stream_scanner import ByteStream
from link_crawler.utils.url_tools import validate_url


logger = logging.getLogger(__name__)


class HttpByteStream:
    """File-like view over a streaming ``httpx.Response`` body."""

    def __init__(self, url: str, response: httpx.Response) -> None:
        self.url = url
        self.response = response
        self._chunks: Iterator[bytes] = response.iter_bytes()
        self._buffer = b""
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def read(self, size: int = -1, /) -> bytes:
        if self._closed:
            raise StreamIOError(self.url, "read on closed stream")
        try:
            if size is None or size < 0:
                data = self._buffer + b"".join(self._chunks)
                self._buffer = b""
                return data
            while not self._buffer:
                chunk = next(self._chunks, None)
                if chunk is None:
                    return b""
                self._buffer = chunk
        except (httpx.HTTPError, httpx.StreamError) as exc:
            raise StreamIOError(self.url, str(exc) or type(exc).__name__) from exc
        data, self._buffer = self._buffer[:size], self._buffer[size:]
        return data

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self.response.close()


class StreamFetcher:
    """Fetch primitive used by the orchestrator.

    Use as a context manager (or call :meth:`close`) to release the pooled
    HTTP client.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        transport: httpx.BaseTransport | None = None,
        user_agent: str = "",
    ) -> None:
        self.settings = settings or Settings()
        self._transport = transport
        self._user_agent = user_agent
        self.client: httpx.Client | None = None

    def __enter__(self) -> StreamFetcher:
        self._ensure_client()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            self.client = None

    def _create_client(self) -> httpx.Client:
        """Create HTTP client with timeout and transport configuration."""
        user_agent = self._user_agent or self.settings.get_random_user_agent()
        transport = self._transport or httpx.HTTPTransport(retries=self.settings.max_retries)
        # A read deadline keeps a stalled server from blocking the crawl forever
        timeout = httpx.Timeout(self.settings.http_timeout, connect=10.0)
        headers = {
            "User-Agent": user_agent,
            "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
            "Accept-Language": "en,en-US;q=0.9",
        }
        return httpx.Client(transport=transport, timeout=timeout, headers=headers, follow_redirects=True)

    def _ensure_client(self) -> httpx.Client:
        if self.client is None:
            self.client = self._create_client()
        return self.client

    def open_stream(self, url: str) -> ByteStream:
        """Open a byte stream for ``url``.

        Raises:
            MalformedURLError: the URL cannot be parsed or uses an unsupported scheme.
            StreamIOError: connection failure, HTTP error status, or unreadable file.
        """
        validate_url(url)
        if urlparse(url).scheme.lower() == "file":
            return self._open_file(url)
        return self._open_http(url)

    def _open_file(self, url: str) -> ByteStream:
        path = Path(url2pathname(urlparse(url).path))
        try:
            return path.open("rb")
        except OSError as exc:
            raise StreamIOError(url, str(exc)) from exc

    def _open_http(self, url: str) -> ByteStream:
        client = self._ensure_client()
        try:
            request = client.build_request("GET", url)
            response = client.send(request, stream=True)
        except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
            raise MalformedURLError(url, str(exc)) from exc
        except httpx.HTTPError as exc:
            raise StreamIOError(url, str(exc) or type(exc).__name__) from exc

        if response.status_code >= 400:
            response.close()
            raise StreamIOError(url, f"HTTP {response.status_code}")

        logger.debug("Opened stream for %s (status %s)", url, response.status_code)
        return HttpByteStream(url, response)
