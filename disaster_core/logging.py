"""
Logging setup for disaster-hub.

Everything is written through loguru. Records emitted by libraries that use
the standard ``logging`` module (uvicorn, fastapi, httpx) are forwarded to
the same sink so one format covers the whole process.
"""

import logging
import sys

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
)

FORWARDED_LOGGERS = ("uvicorn", "uvicorn.access", "uvicorn.error", "fastapi", "httpx")


class InterceptHandler(logging.Handler):
    """Forward stdlib log records to loguru, keeping the original call site."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging's own frames so loguru reports the library caller
        frame, depth = logging.currentframe(), 2
        while frame is not None and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def setup_logging(level: str = "INFO"):
    """Install the stdout sink and route stdlib loggers through it."""
    logger.remove()
    logger.add(sys.stdout, format=LOG_FORMAT, level=level, colorize=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)

    for name in FORWARDED_LOGGERS:
        stdlib_logger = logging.getLogger(name)
        stdlib_logger.handlers = [InterceptHandler()]
        stdlib_logger.propagate = False

    # httpx request lines carry the API key query parameter; keep them below INFO
    logging.getLogger("httpx").setLevel(logging.WARNING)

    logger.info(f"Logging initialized at {level}")
