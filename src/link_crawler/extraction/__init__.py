"""Streaming hyperlink extraction (scanner + tag interpreter)."""

from link_crawler.extraction.link_extractor import LinkExtractor
from link_crawler.extraction.stream_scanner import ByteStream, StreamScanner
from link_crawler.extraction.tag_interpreter import TagInterpreter, TagKind, classify_tag


__all__ = [
    "ByteStream",
    "LinkExtractor",
    "StreamScanner",
    "TagInterpreter",
    "TagKind",
    "classify_tag",
]
