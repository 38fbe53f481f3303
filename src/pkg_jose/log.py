"""
Structured logging for the library.

Events go through the standard library logger ``pkg_jose`` so nothing is
emitted unless the host application enables it.
"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "pkg_jose"


def get_logger() -> structlog.stdlib.BoundLogger:
    return structlog.wrap_logger(
        logging.getLogger(LOGGER_NAME),
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(log_level: str = "warning") -> None:
    """Console logging on stderr, for the command line tool."""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers = [handler]
    logger.setLevel(getattr(logging, log_level.upper(), logging.WARNING))
    logger.propagate = False
