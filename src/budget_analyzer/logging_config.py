"""structlog setup for the Budget Analyzer.

Modules log through ``structlog.get_logger()`` with an event name followed by
key/value context. ``configure_logging`` is called once by entry points; the
library itself never configures logging on import.
"""

import logging

import structlog


def configure_logging(level: str = "INFO") -> None:
    """Configure structlog to render to the console, filtering below ``level``."""
    numeric_level = logging.getLevelName(level.upper())
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        cache_logger_on_first_use=False,
    )
