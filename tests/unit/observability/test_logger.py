"""Tests for structured logging."""

import json
import logging

from apps.rss2twtxt.observability.logger import (
    StructuredFormatter,
    clear_context,
    configure_logging,
    get_logger,
    set_context,
)


class TestStructuredLogger:
    """Tests for StructuredLogger."""

    def test_one_instance_per_name(self) -> None:
        assert get_logger("rss2twtxt.a") is get_logger("rss2twtxt.a")
        assert get_logger("rss2twtxt.a") is not get_logger("rss2twtxt.b")

    def test_defers_to_root_level(self) -> None:
        logger = get_logger("rss2twtxt.level")
        assert logger.name == "rss2twtxt.level"
        assert logging.getLogger("rss2twtxt.level").level == logging.NOTSET

    def test_feed_registered_carries_data(self, caplog) -> None:
        """Test domain helpers attach extra data to the record."""
        logger = get_logger("test.events")
        with caplog.at_level(logging.INFO, logger="test.events"):
            logger.feed_registered("alice", "http://a.example/feed")

        record = caplog.records[-1]
        assert record.getMessage() == "Feed registered alice: http://a.example/feed"
        assert record.extra_data == {"feed": "alice", "url": "http://a.example/feed"}


class TestLoggingContext:
    """Tests for logging context management."""

    def test_set_and_clear_context(self) -> None:
        """Test setting and clearing context."""
        set_context(request_id="req-1", feed_name="alice")

        clear_context()

        from apps.rss2twtxt.observability.logger import _feed_name, _request_id

        assert _request_id.get() is None
        assert _feed_name.get() is None

    def test_partial_context_update(self) -> None:
        """Test that partial updates preserve other values."""
        clear_context()
        set_context(request_id="req-1")

        from apps.rss2twtxt.observability.logger import _feed_name, _request_id

        assert _request_id.get() == "req-1"
        assert _feed_name.get() is None

        set_context(feed_name="alice")
        assert _request_id.get() == "req-1"
        assert _feed_name.get() == "alice"
        clear_context()


class TestStructuredFormatter:
    """Tests for JSON formatting."""

    def test_format_includes_context_and_data(self) -> None:
        set_context(request_id="req-9", feed_name="bob")
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "hello %s", ("world",), None)
        record.extra_data = {"status": 404}

        data = json.loads(StructuredFormatter().format(record))
        clear_context()

        assert data["message"] == "hello world"
        assert data["level"] == "WARNING"
        assert data["request_id"] == "req-9"
        assert data["feed_name"] == "bob"
        assert data["data"] == {"status": 404}


class TestConfigureLogging:
    """Tests for root logger configuration."""

    def test_json_format(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("debug", "json")
            assert root.level == logging.DEBUG
            assert isinstance(root.handlers[0].formatter, StructuredFormatter)
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)

    def test_text_format(self) -> None:
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level
        try:
            configure_logging("WARNING", "text")
            assert root.level == logging.WARNING
            assert not isinstance(root.handlers[0].formatter, StructuredFormatter)
        finally:
            root.handlers = saved_handlers
            root.setLevel(saved_level)
