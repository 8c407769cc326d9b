"""
Logging Setup
=============
structlog configuration for services embedding pakailink-core.

Usage:
    from pakailink_core.logs import setup_logging

    setup_logging(level="INFO", json_output=True)
"""

import logging
import sys

import structlog

# Header values that must never reach a log line
REDACTED_HEADERS = {"authorization", "x-signature"}


def setup_logging(level: str = "INFO", json_output: bool = True) -> None:
    """
    Configure structlog on top of stdlib logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: Render JSON lines (production) instead of console output
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(handler)

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    # httpx logs every request line at INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)


def redact_headers(headers: dict) -> dict:
    """Return a copy of headers safe to log."""
    return {k: v for k, v in headers.items() if k.lower() not in REDACTED_HEADERS}


def token_preview(token: str) -> str:
    """First 20 characters of a token, for debugging output."""
    return f"{token[:20]}..." if token else ""
