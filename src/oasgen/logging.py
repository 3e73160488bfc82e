"""structlog setup for the command line entry point.

Library modules wrap a stdlib logger with ``structlog.wrap_logger`` so
that, until an application configures logging, their events follow the
stdlib defaults and stay off stdout.
"""

import logging
import sys

import structlog

__all__: list[str] = ["configure_logging"]

_LOGGING_CONFIGURED: bool = False


def _configure_stdlib_logging(level: int) -> None:
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root_logger.handlers.clear()
    root_logger.addHandler(handler)


def configure_logging(level: str | int = "WARNING") -> None:
    """Route structlog output to stderr at *level*.

    Safe to call more than once; only the first call has an effect.
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        return

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    _configure_stdlib_logging(level)

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    _LOGGING_CONFIGURED = True
