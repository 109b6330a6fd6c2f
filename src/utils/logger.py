"""Logging for the Recipe Book.

Text output goes through rich (the same library query.py prints with) on
stderr, so log lines never mix with command output. JSON output is one object
per line for log shippers.

Environment:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)
"""

import json
import logging
import os
import sys
from typing import Any

from rich.console import Console
from rich.logging import RichHandler


class JSONFormatter(logging.Formatter):
    """One JSON object per record, carrying recipe/message ids when present."""

    # Set through logger.*(..., extra={...})
    EXTRA_FIELDS = ("recipe_id", "message_id")

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in self.EXTRA_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data)


class KitchenFormatter(logging.Formatter):
    """Message body for RichHandler: level icon, logger name, recipe id.

    RichHandler renders the time and level columns itself.
    """

    ICONS = {
        "DEBUG": "🔍",
        "INFO": "🍳",
        "WARNING": "⚠️",
        "ERROR": "❌",
        "CRITICAL": "🔥",
    }

    def formatMessage(self, record: logging.LogRecord) -> str:
        icon = self.ICONS.get(record.levelname, "•")
        recipe_id = getattr(record, "recipe_id", None)
        suffix = f" [recipe {recipe_id}]" if recipe_id is not None else ""
        return f"{icon} {record.name}: {record.getMessage()}{suffix}"


def _build_handler(log_type: str) -> logging.Handler:
    if log_type == "json":
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(JSONFormatter())
        return handler

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        markup=False,
        log_time_format="%Y-%m-%d %H:%M:%S",
    )
    handler.setFormatter(KitchenFormatter())
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return the named logger, attaching a handler on first use.

    Args:
        name: Logger name.

    Returns:
        Logger configured from LOG_LEVEL and LOG_TYPE.
    """
    logger_instance = logging.getLogger(name)
    if logger_instance.handlers:
        return logger_instance

    log_level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    if not isinstance(log_level, int):
        log_level = logging.INFO
    logger_instance.setLevel(log_level)

    handler = _build_handler(os.getenv("LOG_TYPE", "text").lower())
    handler.setLevel(log_level)
    logger_instance.addHandler(handler)
    return logger_instance


logger = get_logger("recipe_book")

# Client libraries log every HTTP request at INFO
for _name in ("google.genai", "httpx"):
    logging.getLogger(_name).setLevel(logging.WARNING)
