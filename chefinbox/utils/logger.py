"""Logging setup for ChefInBox.

Configured via environment variables:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text, json (default: text)

Session code attaches ``session_id`` and ``state`` through ``extra=`` so both
formatters can show which session and state a line belongs to.
"""

import json
import logging
import os
import sys
from typing import Any

CONTEXT_FIELDS = ("session_id", "state")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, suitable for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for field in CONTEXT_FIELDS:
            if hasattr(record, field):
                log_data[field] = getattr(record, field)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, ensure_ascii=False)


class RichTextFormatter(logging.Formatter):
    """Coloured single-line text for terminals."""

    COLORS = {
        "DEBUG": "\033[36m",      # Cyan
        "INFO": "\033[32m",       # Green
        "WARNING": "\033[33m",    # Yellow
        "ERROR": "\033[31m",      # Red
        "RESET": "\033[0m",
    }

    ICONS = {
        "DEBUG": "🔍",
        "INFO": "🍳",
        "WARNING": "⚠️",
        "ERROR": "❌",
    }

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        color = self.COLORS.get(level, self.COLORS["RESET"])
        icon = self.ICONS.get(level, "")
        reset = self.COLORS["RESET"]
        timestamp = self.formatTime(record, "%Y-%m-%d %H:%M:%S")

        context = " ".join(
            f"{field}={getattr(record, field)}" for field in CONTEXT_FIELDS if hasattr(record, field)
        )
        suffix = f" [{context}]" if context else ""

        message = f"{color}{icon} {timestamp} {level:<8} {record.name:<28} {record.getMessage()}{suffix}{reset}"
        if record.exc_info:
            message += f"\n{self.formatException(record.exc_info)}"
        return message


def get_logger(name: str) -> logging.Logger:
    """Create and configure a logger.

    Args:
        name: Logger name, typically module name.

    Returns:
        Configured logger instance (handlers are attached only once).
    """
    logger_instance = logging.getLogger(name)
    if logger_instance.handlers:
        return logger_instance

    log_level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    log_type = os.getenv("LOG_TYPE", "text").lower()

    logger_instance.setLevel(log_level)
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(JSONFormatter() if log_type == "json" else RichTextFormatter())
    logger_instance.addHandler(handler)

    return logger_instance


logger = get_logger("chefinbox")

# Gemini SDK debug output drowns the session logs
logging.getLogger("google.genai").setLevel(logging.WARNING)
