"""
Logging setup for the catalog server and CLI.

Console output is plain text, coloured on a terminal. An optional rotating
log file can be written as JSON lines. Request lines from the HTTP handler go
to the ``appcatalog.access`` logger, which can be quietened on its own.
"""

from __future__ import annotations

import json
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

ACCESS_LOGGER = "appcatalog.access"

# Requests are served on worker threads, so the thread name is logged
CONSOLE_FORMAT = "%(asctime)s %(levelname)s [%(threadName)s] %(name)s: %(message)s"
FILE_FORMAT = (
    "%(asctime)s %(levelname)s [%(threadName)s] %(name)s "
    "(%(filename)s:%(lineno)d) %(message)s"
)

LOG_FILE_MAX_BYTES = 10 * 1024 * 1024
LOG_FILE_BACKUPS = 5


class JSONFormatter(logging.Formatter):
    """One JSON object per record, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "message": record.getMessage(),
        }
        data = getattr(record, "extra_data", None)
        if data:
            entry["data"] = data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ColoredFormatter(logging.Formatter):
    """Colours the level name of a copy of each record."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[35m",
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno)
        if color is None:
            return super().format(record)
        # Other handlers on other threads see the same record
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[Path] = None,
    json_logs: bool = False,
    access_log: bool = True,
):
    """
    Configure logging for the catalog server and CLI.

    Handlers installed by an earlier call are replaced; handlers added by
    anything else are left in place.

    Args:
        level: Level for the root logger and every handler
        log_file: Rotating log file to write as well as stderr (optional)
        json_logs: Write the log file as JSON lines
        access_log: Log one line per HTTP request at INFO
    """
    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        if getattr(handler, "_appcatalog", False):
            root.removeHandler(handler)
            handler.close()

    console = logging.StreamHandler(sys.stderr)
    formatter_class = ColoredFormatter if sys.stderr.isatty() else logging.Formatter
    console.setFormatter(formatter_class(CONSOLE_FORMAT))
    _install(root, console, level)

    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_file,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
            encoding="utf-8",
        )
        file_handler.setFormatter(JSONFormatter() if json_logs else logging.Formatter(FILE_FORMAT))
        _install(root, file_handler, level)

    logging.getLogger(ACCESS_LOGGER).setLevel(logging.NOTSET if access_log else logging.WARNING)
    logging.captureWarnings(True)


def _install(root: logging.Logger, handler: logging.Handler, level: int) -> None:
    handler.setLevel(level)
    handler._appcatalog = True
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Logger under the ``appcatalog.`` namespace."""
    return logging.getLogger(f"appcatalog.{name}")
