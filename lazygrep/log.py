"""Logging setup.

The package logger carries a ``NullHandler`` so nothing is printed over the
TUI; ``configure_logging`` attaches a file handler when asked for one.
"""

from __future__ import annotations

import logging
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"


def configure_logging(log_file: Path | None, level: int = logging.DEBUG) -> logging.Handler | None:
    """Route ``lazygrep`` log records to ``log_file``; no-op when it is ``None``."""
    if log_file is None:
        return None
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("lazygrep")
    package_logger.addHandler(handler)
    package_logger.setLevel(level)
    return handler
