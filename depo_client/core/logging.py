"""Structured logging for the client — structlog rendered through stdlib logging."""

from __future__ import annotations

import logging
import os
import sys

import structlog

_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str | None = None, fmt: str | None = None) -> None:
    """Configure structlog and the root stdlib logger.

    Explicit arguments win; otherwise reads from environment variables:
        DEPO_LOG_LEVEL  — log level (default: INFO)
        DEPO_LOG_FORMAT — console | json (default: console)

    Records go to stderr; stdout belongs to CLI output.
    """
    log_level = (level or os.environ.get("DEPO_LOG_LEVEL", "INFO")).upper()
    json_output = (fmt or os.environ.get("DEPO_LOG_FORMAT", "console")).lower() == "json"

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[
            *pre_chain,
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )
    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(log_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
