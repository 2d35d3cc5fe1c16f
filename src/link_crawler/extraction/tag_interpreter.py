"""Tag-level state machine that turns scanner output into links.

States, in order of a single forward pass:

- SCANNING: skip to the next ``<``.
- TAG_NAME: read the tag name; only names starting with ``a`` or ``b`` are
  read further, and only ``a``, ``base`` and ``body`` are acted on.
- DISPATCH: ``a`` yields a link, ``base`` sets the document base (before the
  body only), ``body`` flips the body flag for the rest of the document.
"""

from __future__ import annotations

from enum import Enum
import logging

from link_crawler.domain.errors import AttributeNotFoundError, MalformedURLError
from link_crawler.domain.model import ParserState
from link_crawler.extraction.stream_scanner import LINE_BREAK, StreamScanner
from link_crawler.utils.url_tools import looks_absolute, resolve_relative, validate_url


logger = logging.getLogger(__name__)

TAG_INITIALS = frozenset({"a", "b"})
# Tag names end at whitespace or at the closing bracket
TAG_NAME_DELIMITERS = (" ", "\t", "\r", LINE_BREAK, ">")


class TagKind(str, Enum):
    """Tags the interpreter acts on."""

    ANCHOR = "a"
    BASE = "base"
    BODY = "body"


def classify_tag(name: str) -> TagKind | None:
    """Map a raw tag token to a :class:`TagKind` (case-insensitive).

    ``"a"``, ``"A"`` and ``"a/"`` are anchors; ``"base"`` and ``"body"`` match
    exactly. Anything else, including ``abbr`` or ``basefont``, is ignored.
    """
    lowered = name.strip().lower().rstrip("/")
    # Exact match only: abbr and basefont must not read as a or base
    for kind in TagKind:
        if lowered == kind.value:
            return kind
    return None


class TagInterpreter:
    """Drives a :class:`StreamScanner` over one document and collects links."""

    def __init__(self, scanner: StreamScanner, state: ParserState | None = None, *, source: str = "") -> None:
        self._scanner = scanner
        self.state = state or ParserState()
        self._source = source
        self._links: list[str] = []

    @property
    def links(self) -> list[str]:
        return list(self._links)

    def run(self) -> list[str]:
        """Scan until the stream is exhausted; return links in document order."""
        while not self._scanner.exhausted:
            if self._scanner.read_until("<", LINE_BREAK):
                self._interpret_tag()
        return self.links

    def _interpret_tag(self) -> None:
        initial = self._scanner.skip_space()
        if not initial or initial.lower() not in TAG_INITIALS:
            return
        name = initial + self._scanner.read_string(*TAG_NAME_DELIMITERS)
        kind = classify_tag(name)
        if kind is None:
            return
        self.dispatch(kind)

    def dispatch(self, kind: TagKind) -> None:
        if kind is TagKind.ANCHOR:
            self._handle_anchor()
        elif kind is TagKind.BASE:
            self._handle_base()
        elif kind is TagKind.BODY:
            self.state.mark_body_reached()

    def _handle_anchor(self) -> None:
        raw = self.extract_href().strip()
        if not raw:
            return
        try:
            if looks_absolute(raw):
                link = validate_url(raw)
            elif self.state.can_resolve_relative():
                assert self.state.base_url is not None
                link = resolve_relative(self.state.base_url, raw)
            else:
                logger.debug(
                    "Dropping relative link %s on %s (base=%s, body_reached=%s)",
                    raw,
                    self._source,
                    self.state.base_url,
                    self.state.body_reached,
                )
                return
        except MalformedURLError as exc:
            logger.warning("Dropping malformed link on %s: %s", self._source, exc)
            return
        self._links.append(link)

    def _handle_base(self) -> None:
        if not self.state.accepts_base():
            logger.debug("Ignoring <base> after <body> on %s", self._source)
            return
        raw = self.extract_href().strip()
        if not raw:
            return
        try:
            self.state.set_base(validate_url(raw))
        except MalformedURLError as exc:
            logger.warning("Ignoring malformed <base> on %s: %s", self._source, exc)

    def extract_href(self) -> str:
        """Return the next ``href="..."`` value, or ``""`` if none is left."""
        try:
            return self._find_href()
        except AttributeNotFoundError:
            return ""

    def _find_href(self) -> str:
        while True:
            ch = self._scanner.skip_space()
            if not ch:
                raise AttributeNotFoundError(f"no href= found in {self._source or 'stream'}")
            if ch.lower() != "h":
                continue
            token = self._scanner.read_string('"', " ")
            if token.lower() == "ref=":
                return self._scanner.read_string('"', LINE_BREAK)
