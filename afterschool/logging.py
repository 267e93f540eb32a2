"""Roster logging through structlog.

Store, import and snapshot events are logged as named events with key/value
context, e.g. ``log.info("import_committed", created=2, updated=1)``.
Streamlit writes to stdout, so log lines go to stderr.
"""

import logging
import sys

import structlog


def setup_logging(json_output: bool = False, log_level: str = "INFO") -> None:
    """Configure structlog for the roster app.

    Args:
        json_output: Render one JSON object per event instead of console lines.
        log_level: Minimum level name; unknown names fall back to INFO.
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )

    # Streamlit and pandas log through stdlib logging
    logging.basicConfig(format="%(message)s", stream=sys.stderr, level=numeric_level)


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger for a roster module (pass __name__)."""
    return structlog.get_logger(name)
