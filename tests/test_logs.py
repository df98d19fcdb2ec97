"""Tests for the structlog configuration."""

import json
import logging
from io import StringIO
from unittest.mock import patch

import structlog

import logs


class TestConfigure:

    def setup_method(self):
        structlog.reset_defaults()
        structlog.contextvars.clear_contextvars()
        logging.getLogger().handlers.clear()

    def teardown_method(self):
        structlog.reset_defaults()
        structlog.contextvars.clear_contextvars()
        logging.getLogger().handlers.clear()

    def test_json_output_carries_service_name(self, monkeypatch):
        monkeypatch.delenv("POSTBOARD_LOG_FORMAT", raising=False)
        logs.configure("postboard-test")

        buf = StringIO()
        with patch("sys.stdout", buf):
            structlog.get_logger().info("hello", key="value")

        parsed = json.loads(buf.getvalue().strip())
        assert parsed["event"] == "hello"
        assert parsed["key"] == "value"
        assert parsed["level"] == "info"
        assert parsed["service"] == "postboard-test"
        assert "timestamp" in parsed

    def test_level_filters_debug(self, monkeypatch):
        monkeypatch.setenv("POSTBOARD_LOG_LEVEL", "WARNING")
        logs.configure("postboard-test")

        buf = StringIO()
        with patch("sys.stdout", buf):
            structlog.get_logger().info("quiet")

        assert buf.getvalue() == ""

    def test_reset_context_keeps_service_name(self, monkeypatch):
        monkeypatch.delenv("POSTBOARD_LOG_FORMAT", raising=False)
        logs.configure("postboard-test")
        structlog.contextvars.bind_contextvars(stale="yes")

        logs.reset_context(request_id="req_1")

        context = structlog.contextvars.get_contextvars()
        assert context == {"_service_name": "postboard-test", "request_id": "req_1"}
