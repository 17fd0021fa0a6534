"""
Logging Configuration — Log setup for hook runs.

The hook's stderr is shown to the person pushing, so by default logs go
there; set a log file to keep them on the server instead.

## Environment Variables

- SM_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- SM_LOG_FORMAT: json, text (default: text)
- SM_LOG_FILE: append logs to this file instead of stderr

## Usage

    from secure_mirror.logging_config import setup_logging

    setup_logging()  # Call once at startup
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional

CONTEXT_FIELDS = ("phase", "repo_name", "ref_name")


class JSONFormatter(logging.Formatter):
    """
    JSON log formatter for structured logging.

    Output format:
    {"ts": "...", "level": "...", "logger": "...", "message": "...", ...}
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: Dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for name in CONTEXT_FIELDS:
            if hasattr(record, name):
                log_entry[name] = getattr(record, name)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry)


class HumanFormatter(logging.Formatter):
    """
    Human-readable log formatter.

    Output format:
    2026-01-01 12:34:56 INFO    [hook           ] Message
    """

    def format(self, record: logging.LogRecord) -> str:
        time_str = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        module = record.name.split(".")[-1][:15]
        msg = record.getMessage()
        if record.exc_info:
            msg = f"{msg}\n{self.formatException(record.exc_info)}"
        return f"{time_str} {record.levelname:7} [{module:15}] {msg}"


def setup_logging(
    level: Optional[str] = None,
    format_type: Optional[str] = None,
    log_file: Optional[str] = None,
) -> None:
    """
    Configure logging for the hook.

    Args:
        level: Log level. Defaults to SM_LOG_LEVEL env var or INFO.
        format_type: Output format (json, text).
                     Defaults to SM_LOG_FORMAT env var or text.
        log_file: File to append to. Defaults to SM_LOG_FILE, else stderr.
    """
    log_level = (level or os.environ.get("SM_LOG_LEVEL", "INFO")).upper()
    log_format = (format_type or os.environ.get("SM_LOG_FORMAT", "text")).lower()
    log_path = log_file or os.environ.get("SM_LOG_FILE")

    numeric_level = getattr(logging, log_level, logging.INFO)

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JSONFormatter()
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()

    handler: logging.Handler
    if log_path:
        handler = logging.FileHandler(log_path, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    handler.setLevel(numeric_level)
    root.addHandler(handler)

    # Request lines would leak tokenized URLs at DEBUG
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging configured: level={log_level}, format={log_format}"
    )
