"""Structured logging for the devfile-scout CLI."""

from __future__ import annotations

import logging
import os
import sys

import structlog

# Third-party loggers kept at WARNING whatever the scan level
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: str | None = None) -> None:
    """Route structlog and stdlib records through one stderr handler.

    Reads from environment variables:
        DEVFILE_SCOUT_LOG_LEVEL  - scan log level (default: INFO)
        DEVFILE_SCOUT_LOG_FORMAT - console | json (default: console)

    An explicit *level* overrides ``DEVFILE_SCOUT_LOG_LEVEL``.
    """
    log_level = (level or os.environ.get("DEVFILE_SCOUT_LOG_LEVEL", "INFO")).upper()
    as_json = os.environ.get("DEVFILE_SCOUT_LOG_FORMAT", "console").lower() == "json"

    pre_chain: list[structlog.types.Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
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

    # stdout is reserved for command output
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer() if as_json else structlog.dev.ConsoleRenderer(),
            ],
        )
    )

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(log_level)
    logging.getLogger("devfile_scout").setLevel(log_level)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
