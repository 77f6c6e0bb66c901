"""Tests for setup_logging."""

import json
import logging
import os
from unittest.mock import patch

import pytest
import structlog

from depo_client.core.logging import setup_logging


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    httpx_level = logging.getLogger("httpx").level
    yield
    root.handlers = handlers
    root.setLevel(level)
    logging.getLogger("httpx").setLevel(httpx_level)
    structlog.reset_defaults()


class TestSetupLogging:
    def test_json_events_go_to_stderr(self, restore_logging, capsys):
        setup_logging("debug", "json")

        structlog.get_logger("depo_client.test").info("store.refreshed", count=2)

        captured = capsys.readouterr()
        assert captured.out == ""
        event = json.loads(captured.err.strip().splitlines()[-1])
        assert event["event"] == "store.refreshed"
        assert event["count"] == 2
        assert event["level"] == "info"
        assert event["logger"] == "depo_client.test"

    def test_level_from_environment(self, restore_logging):
        with patch.dict(os.environ, {"DEPO_LOG_LEVEL": "warning"}):
            setup_logging()

        assert logging.getLogger().level == logging.WARNING
        assert len(logging.getLogger().handlers) == 1

    def test_http_libraries_quietened(self, restore_logging):
        setup_logging("debug")

        assert logging.getLogger("httpx").level == logging.WARNING
