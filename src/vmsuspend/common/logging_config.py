"""
Logging configuration for the suspend helper.

Console output for diagnostics plus the append-only activity log that the
tray menu opens.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Optional

APP_LOGGER = "vmsuspend"

ACTIVITY_FORMAT = "%(asctime)s - %(message)s"
ACTIVITY_DATEFMT = "%Y-%m-%d %H:%M:%S"


class ColoredFormatter(logging.Formatter):
    """Colored console formatter for better readability."""

    COLORS = {
        logging.DEBUG: "\033[36m",    # Cyan
        logging.INFO: "\033[32m",     # Green
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",    # Red
        logging.CRITICAL: "\033[35m", # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelno, "")
        levelname = record.levelname

        record.levelname = f"{color}{levelname}{self.RESET}"
        result = super().format(record)

        # Restore original levelname for other handlers
        record.levelname = levelname

        return result


def activity_handler(log_file: Path) -> logging.FileHandler:
    """
    Create the activity log handler.

    Lines are appended as ``<timestamp> - <message>``. The file is never
    rotated or truncated.
    """
    log_file.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(logging.Formatter(ACTIVITY_FORMAT, ACTIVITY_DATEFMT))
    return handler


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
):
    """
    Configure logging for the suspend helper.

    Args:
        level: Console logging level (default: INFO)
        log_file: Activity log path (optional). Only records from the
            application's own loggers are written to it.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(min(level, logging.INFO))

    # Clear existing handlers
    root_logger.handlers.clear()

    # pythonw and windowed frozen builds have no stderr
    if sys.stderr is not None:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)

        if getattr(sys.stderr, "isatty", lambda: False)():
            console_format = ColoredFormatter("%(levelname)s %(name)s: %(message)s")
        else:
            console_format = logging.Formatter("%(levelname)s %(name)s: %(message)s")

        console_handler.setFormatter(console_format)
        root_logger.addHandler(console_handler)

    app_logger = logging.getLogger(APP_LOGGER)
    for handler in list(app_logger.handlers):
        app_logger.removeHandler(handler)
        handler.close()

    if log_file:
        app_logger.addHandler(activity_handler(log_file))

    # Suppress noisy loggers
    logging.getLogger("PyQt6").setLevel(logging.WARNING)

