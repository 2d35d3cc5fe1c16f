"""Unit tests for the forward-only stream scanner."""

import io

import pytest

from link_crawler.domain.errors import StreamIOError
from link_crawler.extraction.stream_scanner import ByteStream, StreamScanner


class TestReadUntil:
    def test_returns_true_when_first_target_found(self, make_stream):
        scanner = StreamScanner(make_stream("abc<def"))

        assert scanner.read_until("<", "\n") is True
        assert scanner.read_string(">") == "def"

    def test_returns_false_when_second_target_found_first(self, make_stream):
        scanner = StreamScanner(make_stream("ab\ncd<e"))

        assert scanner.read_until("<", "\n") is False
        assert scanner.exhausted is False
        assert scanner.read_until("<", "\n") is True

    def test_matching_is_case_insensitive(self, make_stream):
        scanner = StreamScanner(make_stream("xxAyy"))

        assert scanner.read_until("a", "z") is True
        assert scanner.read_string("Y") == ""

    def test_end_of_stream_returns_false_and_exhausts(self, make_stream):
        scanner = StreamScanner(make_stream("no tags here"))

        assert scanner.read_until("<", "\n") is False
        assert scanner.exhausted is True
        # Further reads stay at end of stream
        assert scanner.read_until("<", "\n") is False


class TestSkipSpace:
    def test_returns_first_non_whitespace_character(self, make_stream):
        scanner = StreamScanner(make_stream("  \n\t x rest"))

        assert scanner.skip_space() == "x"
        assert scanner.read_string(" ") == ""
        assert scanner.read_string(" ") == "rest"

    def test_returns_empty_string_at_end(self, make_stream):
        scanner = StreamScanner(make_stream("   \n "))

        assert scanner.skip_space() == ""
        assert scanner.exhausted is True


class TestReadString:
    def test_stops_at_any_delimiter_and_consumes_it(self, make_stream):
        scanner = StreamScanner(make_stream('ref="http://a.test/"'))

        assert scanner.read_string('"', " ") == "ref="
        assert scanner.read_string('"', "\n") == "http://a.test/"
        assert scanner.exhausted is False
        assert scanner.read_string('"') == ""
        assert scanner.exhausted is True

    def test_returns_partial_text_at_end_of_stream(self, make_stream):
        scanner = StreamScanner(make_stream("unterminated"))

        assert scanner.read_string('"') == "unterminated"
        assert scanner.exhausted is True


class TestDecoding:
    def test_multibyte_characters_split_across_reads(self, make_stream):
        scanner = StreamScanner(make_stream("é€<a"), chunk_size=1)

        assert scanner.read_string("<") == "é€"
        assert scanner.read_string(">") == "a"

    def test_invalid_bytes_are_replaced(self, make_stream):
        scanner = StreamScanner(make_stream(b"\xff<"))

        assert scanner.read_string("<") == "\ufffd"

    def test_consumed_counts_characters(self, make_stream):
        scanner = StreamScanner(make_stream("ab<cd"))
        scanner.read_until("<", "\n")

        assert scanner.consumed == 3

    def test_rejects_non_positive_chunk_size(self, make_stream):
        with pytest.raises(ValueError):
            StreamScanner(make_stream("x"), chunk_size=0)


class TestFailuresAndClose:
    def test_read_error_becomes_stream_io_error(self, flaky_stream_factory):
        scanner = StreamScanner(flaky_stream_factory(b"ab"), source="http://a.test/")

        with pytest.raises(StreamIOError) as exc_info:
            scanner.read_string("<")

        assert exc_info.value.url == "http://a.test/"
        assert scanner.exhausted is True

    def test_close_closes_stream_once(self, make_stream):
        stream = make_stream("abc")
        scanner = StreamScanner(stream)

        scanner.close()
        scanner.close()

        assert stream.close_calls == 1
        assert scanner.exhausted is True
        assert scanner.skip_space() == ""

    def test_bytesio_satisfies_byte_stream_protocol(self):
        assert isinstance(io.BytesIO(b""), ByteStream)
