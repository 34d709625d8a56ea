"""structlog configuration shared by the CLI and the HTTP service."""

from __future__ import annotations

import logging
import sys

import structlog


def _stderr_logger(*args) -> structlog.PrintLogger:
    # resolved per call so that redirected streams are honoured
    return structlog.PrintLogger(file=sys.stderr)


def setup_logging(debug: bool = False, level: str = "INFO") -> None:
    """Configure structlog for the whole process.

    Console rendering is used in debug mode, JSON lines otherwise.  Logs go to
    stderr so that CLI output on stdout stays machine readable.
    """
    log_level = logging.DEBUG if debug else logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    renderer = (
        structlog.dev.ConsoleRenderer()
        if debug
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=_stderr_logger,
        cache_logger_on_first_use=False,
    )


def get_logger(name: str | None = None) -> structlog.typing.FilteringBoundLogger:
    if name:
        return structlog.get_logger(name)
    return structlog.get_logger()
