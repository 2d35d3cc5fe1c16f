"""Unit tests for URL validation and resolution helpers."""

import pytest

from link_crawler.domain.errors import MalformedURLError
from link_crawler.utils.url_tools import is_valid_url, looks_absolute, resolve_relative, validate_url


class TestValidateUrl:
    @pytest.mark.parametrize(
        "url",
        [
            "http://a.test/",
            "https://a.test/path?q=1#frag",
            "HTTP://A.TEST/",
            "http://a.test:8080/x",
            "file:///tmp/page.html",
        ],
    )
    def test_accepts_fetchable_urls(self, url):
        assert validate_url(url) == url

    def test_strips_surrounding_whitespace(self):
        assert validate_url("  http://a.test/ \n") == "http://a.test/"

    @pytest.mark.parametrize(
        ("url", "reason"),
        [
            ("", "empty URL"),
            ("   ", "empty URL"),
            ("page.html", "no protocol"),
            ("/abs/path", "no protocol"),
            ("mailto:someone@a.test", "unknown protocol: mailto"),
            ("javascript:void(0)", "unknown protocol: javascript"),
            ("http://", "missing host"),
            ("http://a.test/has space", "whitespace inside URL"),
        ],
    )
    def test_rejects_malformed(self, url, reason):
        with pytest.raises(MalformedURLError) as exc_info:
            validate_url(url)

        assert exc_info.value.url == url
        assert exc_info.value.reason == reason

    def test_rejects_bad_port(self):
        with pytest.raises(MalformedURLError):
            validate_url("http://a.test:notaport/")

    def test_malformed_error_is_value_error(self):
        with pytest.raises(ValueError):
            validate_url("nope")

    def test_is_valid_url(self):
        assert is_valid_url("https://a.test/")
        assert not is_valid_url("ftp://a.test/")


class TestLooksAbsolute:
    @pytest.mark.parametrize(
        ("link", "expected"),
        [
            ("http://a.test/", True),
            ("HTTPS://a.test/", True),
            ("http", True),
            ("xhttp://a.test/", False),
            ("htt", False),
            ("page.html", False),
            ("//cdn.test/x.js", False),
            ("", False),
        ],
    )
    def test_first_four_characters_decide(self, link, expected):
        assert looks_absolute(link) is expected


class TestResolveRelative:
    @pytest.mark.parametrize(
        ("base", "link", "expected"),
        [
            ("http://a.test/dir/", "page.html", "http://a.test/dir/page.html"),
            ("http://a.test/dir/index.html", "page.html", "http://a.test/dir/page.html"),
            ("http://a.test/dir/", "../up.html", "http://a.test/up.html"),
            ("http://a.test/dir/", "/root.html", "http://a.test/root.html"),
            ("http://a.test/dir/", "//cdn.test/x.js", "http://cdn.test/x.js"),
            ("http://a.test/dir/", "?q=1", "http://a.test/dir/?q=1"),
        ],
    )
    def test_resolves_against_base(self, base, link, expected):
        assert resolve_relative(base, link) == expected

    def test_result_is_validated(self):
        with pytest.raises(MalformedURLError):
            resolve_relative("http://a.test/", "mailto:x@a.test")

    def test_broken_authority_raises_malformed(self):
        with pytest.raises(MalformedURLError) as exc_info:
            resolve_relative("http://a.test/", "//[oops")

        assert exc_info.value.url == "//[oops"
