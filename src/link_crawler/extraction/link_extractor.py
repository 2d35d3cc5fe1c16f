"""Streaming hyperlink extractor."""

from __future__ import annotations

import logging

from link_crawler.domain.errors import StreamIOError
from link_crawler.domain.model import ParserState
from link_crawler.extraction.stream_scanner import DEFAULT_CHUNK_SIZE, DEFAULT_ENCODING, ByteStream, StreamScanner
from link_crawler.extraction.tag_interpreter import TagInterpreter


logger = logging.getLogger(__name__)


class LinkExtractor:
    """Build the list of outbound links found in a byte stream.

    The stream is consumed forward-only and closed before returning, including
    when a read fails part way through; links found before the failure are
    still returned. No deduplication happens here.
    """

    def __init__(self, *, chunk_size: int = DEFAULT_CHUNK_SIZE, encoding: str = DEFAULT_ENCODING) -> None:
        self.chunk_size = chunk_size
        self.encoding = encoding

    def create_list(self, base_context_url: str, stream: ByteStream) -> list[str]:
        """Extract links from ``stream``.

        Args:
            base_context_url: URL the stream was opened for. Used for log
                context only; relative links resolve against ``<base>``.
            stream: Open byte stream, closed by this call.

        Returns:
            Links in document order.
        """
        scanner = StreamScanner(
            stream,
            chunk_size=self.chunk_size,
            encoding=self.encoding,
            source=base_context_url,
        )
        interpreter = TagInterpreter(scanner, ParserState(), source=base_context_url)
        try:
            interpreter.run()
        except StreamIOError as exc:
            logger.warning("Error processing stream for %s: %s", base_context_url, exc)
        finally:
            scanner.close()

        links = interpreter.links
        logger.debug(
            "Extracted %d links from %s (%d chars scanned, base=%s)",
            len(links),
            base_context_url,
            scanner.consumed,
            interpreter.state.base_url,
        )
        return links
