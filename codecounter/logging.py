"""Logging setup shared by the codecounter CLI and service."""

from __future__ import annotations

import logging
from pathlib import Path

_LOGGER_NAME = "codecounter"
_CONSOLE_FORMAT = "[codecounter] %(levelname)s %(message)s"
_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger below ``codecounter`` (``codecounter.<name>``)."""
    if not name:
        return logging.getLogger(_LOGGER_NAME)
    return logging.getLogger(f"{_LOGGER_NAME}.{name}")


def _handler(handler: logging.Handler, level: int, fmt: str) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    return handler


def configure_logging(
    *, verbose: bool = False, quiet: bool = False, log_file: Path | None = None
) -> logging.Logger:
    """Send codecounter log records to stderr and, optionally, to ``log_file``.

    ``verbose`` lowers the threshold to DEBUG; ``quiet`` raises it to WARNING
    so only problems reach the console. The file sink always records at the
    chosen level with timestamps.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # one console handler per process, even when main() runs repeatedly
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()

    logger.addHandler(_handler(logging.StreamHandler(), level, _CONSOLE_FORMAT))
    if log_file is not None:
        logger.addHandler(_handler(logging.FileHandler(log_file, encoding="utf-8"), level, _FILE_FORMAT))
    return logger


__all__ = ["configure_logging", "get_logger"]
