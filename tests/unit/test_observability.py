"""Unit tests for structured logging and crawl context propagation."""

import logging
import sys

import orjson
import pytest

from link_crawler.observability import (
    JsonFormatter,
    configure_logging,
    crawl_scope,
    get_crawl_context,
    set_crawl_context,
    update_current_url,
)
from link_crawler.observability.context import crawl_context, generate_crawl_id


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture(autouse=True)
def reset_context():
    token = crawl_context.set(None)
    yield
    crawl_context.reset(token)


def make_record(msg: str, *args, name: str = "link_crawler.crawler", **extra) -> logging.LogRecord:
    record = logging.LogRecord(name, logging.INFO, __file__, 1, msg, args, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestCrawlContext:
    def test_empty_outside_crawl(self):
        assert get_crawl_context() == {}

    def test_scope_binds_and_restores(self):
        with crawl_scope("abc123", seed="http://a.test/") as crawl_id:
            assert crawl_id == "abc123"
            assert get_crawl_context() == {"crawl_id": "abc123", "seed": "http://a.test/"}
            update_current_url("http://a.test/p")
            assert get_crawl_context()["current_url"] == "http://a.test/p"
            assert get_crawl_context()["crawl_id"] == "abc123"

        assert get_crawl_context() == {}

    def test_scope_generates_id(self):
        with crawl_scope() as crawl_id:
            assert len(crawl_id) == 16
            int(crawl_id, 16)

    def test_generated_ids_differ(self):
        assert generate_crawl_id() != generate_crawl_id()

    def test_set_crawl_context(self):
        set_crawl_context("fixed", stage="test")

        assert get_crawl_context() == {"crawl_id": "fixed", "stage": "test"}

    def test_returned_context_is_a_copy(self):
        set_crawl_context("fixed")
        get_crawl_context()["crawl_id"] = "changed"

        assert get_crawl_context()["crawl_id"] == "fixed"


class TestJsonFormatter:
    def test_basic_fields(self):
        payload = orjson.loads(JsonFormatter().format(make_record("Queued %d links", 3)))

        assert payload["message"] == "Queued 3 links"
        assert payload["level"] == "INFO"
        assert payload["logger"] == "link_crawler.crawler"
        assert payload["component"] == "crawler"
        assert "crawl_id" not in payload

    def test_includes_crawl_context(self):
        with crawl_scope("ctx1"):
            update_current_url("http://a.test/x")
            payload = orjson.loads(JsonFormatter().format(make_record("hello")))

        assert payload["crawl_id"] == "ctx1"
        assert payload["current_url"] == "http://a.test/x"

    def test_extras_are_redacted_and_serialized(self):
        record = make_record("fetch", cookie="session=1", urls={"b", "a"}, depth=2)

        payload = orjson.loads(JsonFormatter().format(record))

        assert payload["cookie"] == "[REDACTED]"
        assert payload["urls"] == ["a", "b"]
        assert payload["depth"] == 2

    def test_long_messages_truncated(self):
        payload = orjson.loads(JsonFormatter().format(make_record("x" * 5000)))

        assert len(payload["message"]) == JsonFormatter.MAX_MESSAGE_LEN + 3
        assert payload["message"].endswith("...")

    def test_exception_included(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = logging.LogRecord("link_crawler", logging.ERROR, __file__, 1, "failed", (), None)
            record.exc_info = sys.exc_info()

        payload = orjson.loads(JsonFormatter().format(record))

        assert "RuntimeError: boom" in payload["exception"]
        assert "component" not in payload


class TestConfigureLogging:
    def test_json_handler_installed(self, restore_root_logger):
        configure_logging("debug", json_output=True)

        assert restore_root_logger.level == logging.DEBUG
        assert len(restore_root_logger.handlers) == 1
        assert isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_plain_handler_and_overrides(self, restore_root_logger):
        configure_logging("warning", json_output=False, logger_levels={"link_crawler.frontier": "debug"})

        assert restore_root_logger.level == logging.WARNING
        assert not isinstance(restore_root_logger.handlers[0].formatter, JsonFormatter)
        assert logging.getLogger("link_crawler.frontier").level == logging.DEBUG
        logging.getLogger("link_crawler.frontier").setLevel(logging.NOTSET)

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        configure_logging("chatty")

        assert restore_root_logger.level == logging.INFO
