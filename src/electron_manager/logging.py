"""Logging configuration."""
import json
import logging
import sys
from typing import Any, List

import structlog
from structlog.types import EventDict, Processor

DEFAULT_LOG_LEVEL = "INFO"
IGNORED_LOGGERS = [
    "mcp.server.lowlevel",
    "aiohttp",
    "asyncio",
]


class CompactJSONRenderer:
    """Single-line JSON renderer with minimal output."""
    def __call__(self, _: Any, __: str, event_dict: EventDict) -> str:
        items = {
            "ts": event_dict.pop("timestamp", None),
            "lvl": event_dict.pop("level", "???"),
            "logger": event_dict.pop("logger", None),
            "msg": event_dict.pop("event", ""),
        }
        if event_dict:
            items["data"] = event_dict
        return json.dumps(items, separators=(',', ':'), default=str)


def configure_logging(level: str = DEFAULT_LOG_LEVEL) -> None:
    """Configure structured logging for the application.

    Everything goes to STDERR; STDOUT belongs to the MCP stdio transport.
    A TTY gets the colored console renderer, anything else gets one JSON
    object per line.
    """
    level = level.upper()
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO)
    )
    for name in IGNORED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    renderer: Processor = (
        structlog.dev.ConsoleRenderer(colors=True)
        if sys.stderr.isatty()
        else CompactJSONRenderer()
    )

    processors: List[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        renderer,
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
