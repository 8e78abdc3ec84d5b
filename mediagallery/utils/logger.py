"""
Loguru configuration for the media gallery.

Console output is always on. With ``log_to_file`` two rotating files are added
under the log directory: ``gallery.log`` with everything at the configured
level, and ``gallery-metrics.log`` with one JSON record per timed operation.
Only records bound with ``metrics=True`` reach the metrics file:

    logger.bind(metrics=True, component="index", duration_ms=12.5).info("...")
"""

import inspect
import logging
import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from loguru import Record

    from mediagallery.settings import Settings

DEFAULT_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)

GALLERY_LOG = "gallery.log"
METRICS_LOG = "gallery-metrics.log"

# Stdlib loggers of the server stack routed into loguru
INTERCEPTED_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "fastapi")


class InterceptHandler(logging.Handler):
    """Forward stdlib log records (uvicorn, fastapi) to loguru."""

    def emit(self, record: logging.LogRecord) -> None:
        level: str | int
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Skip logging-module frames so loguru reports the real caller
        frame, depth = inspect.currentframe(), 0
        while frame and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(level, record.getMessage())


def is_metric(record: "Record") -> bool:
    return bool(record["extra"].get("metrics"))


def setup_logging(app_settings: "Settings") -> None:
    """
    Configure loguru sinks from the settings an app or command runs with.

    Safe to call repeatedly; existing sinks are replaced.

    Args:
        app_settings: Active settings (``log_level``, ``log_format``, ``log_to_file``,
            ``log_dir``, ``log_rotation``, ``log_retention``, ``debug``)
    """
    level = app_settings.log_level.upper()
    fmt = app_settings.log_format or DEFAULT_FORMAT

    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format=fmt,
        colorize=True,
        backtrace=app_settings.debug,
        diagnose=app_settings.debug,
    )

    if app_settings.log_to_file:
        log_dir = app_settings.get_log_dir()
        log_dir.mkdir(parents=True, exist_ok=True)

        logger.add(
            log_dir / GALLERY_LOG,
            level=level,
            format=fmt,
            rotation=app_settings.log_rotation,
            retention=app_settings.log_retention,
            compression="zip",
        )
        logger.add(
            log_dir / METRICS_LOG,
            level="DEBUG",
            filter=is_metric,
            serialize=True,
            rotation=app_settings.log_rotation,
            retention=app_settings.log_retention,
        )

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in INTERCEPTED_LOGGERS:
        logging.getLogger(name).handlers = [InterceptHandler()]

    logger.debug(f"Logging configured at {level} (files: {app_settings.log_to_file})")


__all__ = ["InterceptHandler", "is_metric", "logger", "setup_logging"]
