"""URL validation and resolution helpers shared by the extractor and crawler."""

from __future__ import annotations

from urllib.parse import urljoin, urlparse

from link_crawler.domain.errors import MalformedURLError


SUPPORTED_SCHEMES = frozenset({"http", "https", "file"})


def validate_url(url: str) -> str:
    """Return ``url`` unchanged if it parses as an absolute, fetchable URL.

    Raises:
        MalformedURLError: when the text has no supported scheme, no host for
            http(s), or an unparseable netloc/port.
    """
    if not url or not url.strip():
        raise MalformedURLError(url, "empty URL")
    if any(ch.isspace() for ch in url.strip()):
        raise MalformedURLError(url, "whitespace inside URL")

    try:
        parsed = urlparse(url.strip())
        # Accessing port validates it; urlparse is lazy about that
        _ = parsed.port
    except ValueError as exc:
        raise MalformedURLError(url, str(exc)) from exc

    scheme = parsed.scheme.lower()
    if not scheme:
        raise MalformedURLError(url, "no protocol")
    if scheme not in SUPPORTED_SCHEMES:
        raise MalformedURLError(url, f"unknown protocol: {scheme}")
    if scheme in ("http", "https") and not parsed.hostname:
        raise MalformedURLError(url, "missing host")
    return url.strip()


def is_valid_url(url: str) -> bool:
    try:
        validate_url(url)
    except MalformedURLError:
        return False
    return True


def looks_absolute(link: str) -> bool:
    """Heuristic used by the tag interpreter.

    A link counts as absolute when its first four characters, lower-cased,
    contain ``http``. Anything shorter is relative.
    """
    return "http" in link[:4].lower()


def resolve_relative(base_url: str, link: str) -> str:
    """Resolve ``link`` against ``base_url`` (RFC 3986 reference resolution)."""
    try:
        joined = urljoin(base_url, link)
    except ValueError as exc:
        raise MalformedURLError(link, str(exc)) from exc
    return validate_url(joined)
