"""Logging for the Recipe Assistant.

One process-wide logger, "recipe_assistant", writing to stdout.
Environment:
- LOG_LEVEL: DEBUG, INFO, WARNING, ERROR (default: INFO)
- LOG_TYPE: text or json (default: text)

Pipeline code attaches context through `extra=`:
    logger.info("Recipe ready", extra={"recipe_id": recipe_id})
    logger.debug("Ingredient resolved", extra={"tier": "database"})
JSON output carries these as top-level keys; text output appends them
as key=value pairs after the message.
"""

import json
import logging
import os
import sys
from typing import Any, Dict

LOGGER_NAME = "recipe_assistant"

# Keys callers may pass through extra=
CONTEXT_FIELDS = ("recipe_id", "tier", "tool", "elapsed_ms")

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = ("google.genai", "aiohttp", "httpx")


def record_context(record: logging.LogRecord) -> Dict[str, Any]:
    """Collect the pipeline context fields present on a record, in declaration order."""
    return {field: getattr(record, field) for field in CONTEXT_FIELDS if hasattr(record, field)}


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for log shippers."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **record_context(record),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


class RichTextFormatter(logging.Formatter):
    """Colored single-line output for terminals.

    Layout: <icon> <timestamp> <LEVEL> <message> [key=value ...]
    """

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    ICONS = {
        "DEBUG": "🔍",
        "INFO": "ℹ️",
        "WARNING": "⚠️",
        "ERROR": "❌",
        "CRITICAL": "🔥",
    }

    def format(self, record: logging.LogRecord) -> str:
        level = record.levelname
        line = (
            f"{self.ICONS.get(level, '•')} {self.formatTime(record, '%Y-%m-%d %H:%M:%S')} "
            f"{level:<8} {record.getMessage()}"
        )
        context = record_context(record)
        if context:
            line += " [" + " ".join(f"{key}={value}" for key, value in context.items()) + "]"

        color = self.COLORS.get(level)
        if color:
            line = f"{color}{line}{self.RESET}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Return a stdout logger configured from LOG_LEVEL and LOG_TYPE.

    A logger that already has handlers is returned as is.
    """
    instance = logging.getLogger(name)
    if instance.handlers:
        return instance

    level = getattr(logging, os.getenv("LOG_LEVEL", "INFO").upper(), logging.INFO)
    formatter: logging.Formatter = (
        JSONFormatter() if os.getenv("LOG_TYPE", "text").lower() == "json" else RichTextFormatter()
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    instance.addHandler(handler)
    instance.setLevel(level)
    # agno and uvicorn configure the root logger; keep our lines from printing twice
    instance.propagate = False
    return instance


logger = get_logger()

for noisy in QUIET_LOGGERS:
    logging.getLogger(noisy).setLevel(logging.WARNING)
