"""Logging configuration using loguru.

Diagnostics go to stderr through loguru; command results are printed to
stdout by the CLI, so the two never interleave on the same stream.
"""

from __future__ import annotations

import logging
import sys

from loguru import logger

_PLAIN_FORMAT = "<level>{level}</level>: {message}"
_DETAILED_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)


class _InterceptHandler(logging.Handler):
    """Forward records from stdlib loggers, prefixed with the logger name."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        frame = logging.currentframe()
        depth = 2
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, "{}: {}", record.name, record.getMessage())


def setup_logging(level: str = "WARNING") -> None:
    """Configure loguru as the sole logging sink.

    Call this once per CLI invocation, before any command runs.  ``DEBUG``
    switches to the detailed format with timestamps and call sites.
    """
    level = level.upper()
    detailed = level in ("TRACE", "DEBUG")

    logger.remove()
    logger.add(sys.stderr, level=level, format=_DETAILED_FORMAT if detailed else _PLAIN_FORMAT)

    logging.basicConfig(handlers=[_InterceptHandler()], level=0, force=True)

    logger.debug("Logging initialised (level={})", level)
