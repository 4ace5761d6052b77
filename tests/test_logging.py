"""Tests for logging configuration."""
import json
import logging

import structlog

from electron_manager.logging import CompactJSONRenderer, configure_logging, get_logger


def test_compact_json_renderer():
    line = CompactJSONRenderer()(None, "info", {
        "event": "archive_extracted",
        "level": "info",
        "timestamp": "2024-01-01T00:00:00Z",
        "logger": "electron_manager.binaries.fetcher",
        "archive": "electron.zip",
    })

    assert json.loads(line) == {
        "ts": "2024-01-01T00:00:00Z",
        "lvl": "info",
        "logger": "electron_manager.binaries.fetcher",
        "msg": "archive_extracted",
        "data": {"archive": "electron.zip"},
    }
    assert "\n" not in line


def test_compact_json_renderer_without_data():
    data = json.loads(CompactJSONRenderer()(None, "info", {"event": "started", "level": "info"}))
    assert "data" not in data


def test_configure_logging():
    try:
        configure_logging("debug")
        config = structlog.get_config()

        assert config["wrapper_class"] is structlog.stdlib.BoundLogger
        assert isinstance(config["logger_factory"], structlog.stdlib.LoggerFactory)
        assert logging.getLogger("aiohttp").level == logging.WARNING
    finally:
        structlog.reset_defaults()


def test_get_logger():
    logger = get_logger("electron_manager.test")
    assert hasattr(logger, "info")
