"""Forward-only character scanner over an open byte stream.

The scanner pulls fixed-size chunks from the stream, decodes them with an
incremental decoder, and hands characters out one at a time. A character, once
consumed, cannot be looked at again: callers must structure their grammar as a
single forward pass.
"""

from __future__ import annotations

from collections.abc import Iterator
import codecs
import logging
from typing import Protocol, runtime_checkable

from link_crawler.domain.errors import StreamIOError


logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 4096
DEFAULT_ENCODING = "utf-8"
LINE_BREAK = "\n"


@runtime_checkable
class ByteStream(Protocol):
    """Minimal readable stream consumed by the scanner (``io.BytesIO`` fits)."""

    def read(self, size: int = -1, /) -> bytes:  # pragma: no cover - Protocol only
        """Return up to ``size`` bytes; ``b""`` once the stream is drained."""

    def close(self) -> None:  # pragma: no cover - Protocol only
        """Release the stream."""


class StreamScanner:
    """Consume-until primitives over a lazily decoded character sequence.

    All target and delimiter comparisons are case-insensitive. End of stream is
    reported as the empty string (``skip_space``/``read_string``) or ``False``
    (``read_until``) and flips :attr:`exhausted`.
    """

    def __init__(
        self,
        stream: ByteStream,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        encoding: str = DEFAULT_ENCODING,
        source: str = "",
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._stream = stream
        self._chunk_size = chunk_size
        self._encoding = encoding
        self._source = source
        self._chars = self._iter_chars()
        self._exhausted = False
        self._closed = False
        self._consumed = 0

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def consumed(self) -> int:
        """Number of characters read so far."""
        return self._consumed

    def _iter_chars(self) -> Iterator[str]:
        decoder = codecs.getincrementaldecoder(self._encoding)(errors="replace")
        while True:
            try:
                chunk = self._stream.read(self._chunk_size)
            except StreamIOError:
                raise
            except (OSError, ValueError) as exc:
                # ValueError covers reads on a stream closed underneath us
                raise StreamIOError(self._source, str(exc)) from exc
            if not chunk:
                yield from decoder.decode(b"", final=True)
                return
            yield from decoder.decode(chunk)

    def _next_char(self) -> str:
        if self._exhausted:
            return ""
        try:
            ch = next(self._chars, "")
        except StreamIOError:
            self._exhausted = True
            raise
        if not ch:
            self._exhausted = True
            return ""
        self._consumed += 1
        return ch

    def read_until(self, target_a: str, target_b: str) -> bool:
        """Consume characters until ``target_a`` or ``target_b`` is seen.

        Returns True only when ``target_a`` matched first; False when
        ``target_b`` matched or the stream ended.
        """
        first = target_a.lower()
        second = target_b.lower()
        while True:
            ch = self._next_char()
            if not ch:
                return False
            lowered = ch.lower()
            if lowered == first:
                return True
            if lowered == second:
                return False

    def skip_space(self) -> str:
        """Consume whitespace and return the first other character (also consumed)."""
        while True:
            ch = self._next_char()
            if not ch or not ch.isspace():
                return ch

    def read_string(self, *delimiters: str) -> str:
        """Consume up to and including the first delimiter; return the text before it."""
        stops = {d.lower() for d in delimiters}
        buffer: list[str] = []
        while True:
            ch = self._next_char()
            if not ch or ch.lower() in stops:
                return "".join(buffer)
            buffer.append(ch)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._exhausted = True
        try:
            self._stream.close()
        except OSError as exc:
            logger.debug("Error closing stream for %s: %s", self._source, exc)
