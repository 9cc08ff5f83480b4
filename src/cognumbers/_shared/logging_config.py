# Area: Shared
"""
cognumbers._shared.logging_config — Structured logging setup
============================================================

Configures dual logging: terminal (colored) + file (JSON lines).
Provides structured error logging for CognumbersError instances.
"""

from __future__ import annotations
import logging
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Optional, Union

if TYPE_CHECKING:
    from ..errors import CognumbersError

# Package logger
logger = logging.getLogger("cognumbers")


class TerminalFormatter(logging.Formatter):
    """Colored formatter for terminal output."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


class JSONFormatter(logging.Formatter):
    """JSON formatter for file output."""

    EXTRA_FIELDS = ("error_kind", "identifier", "game_id")

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in self.EXTRA_FIELDS:
            if hasattr(record, key):
                log_data[key] = getattr(record, key)
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data, default=str)


def setup_logging(
    log_file_path: Optional[str] = "cognumbers.log",
    level: Union[int, str] = logging.INFO,
) -> None:
    """
    Configure logging for the package.

    Parameters
    ----------
    log_file_path : str, optional
        Path to the JSON log file. None disables file logging.
    level : int or str
        Logging level. Defaults to INFO.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())

    pkg_logger = logging.getLogger("cognumbers")
    pkg_logger.setLevel(level)
    pkg_logger.handlers.clear()

    terminal_handler = logging.StreamHandler(sys.stdout)
    terminal_handler.setLevel(level)
    terminal_handler.setFormatter(TerminalFormatter(
        fmt="%(asctime)s │ %(levelname)s │ %(name)s │ %(message)s",
        datefmt="%H:%M:%S",
    ))
    pkg_logger.addHandler(terminal_handler)

    if log_file_path:
        try:
            log_path = Path(log_file_path)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path, encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(JSONFormatter())
            pkg_logger.addHandler(file_handler)
        except OSError as e:
            pkg_logger.warning(f"Could not create log file: {e}")

    pkg_logger.propagate = False


def log_error(error: "CognumbersError") -> None:
    """
    Log a client error in the structured format.

    The formatted block goes to stderr; a JSON record with the error
    kind and identifier goes through the package logger.
    """
    print(error.format_error_log(), file=sys.stderr)

    logger.error(
        f"{error.__class__.__name__}: {error}",
        extra={
            "error_kind": error.kind,
            "identifier": error.identifier,
        },
    )
