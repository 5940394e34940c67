"""Logging configuration for shortlinks.

Everything logs under the ``shortlinks`` logger. Request logs carry the
link slug and outcome code as record attributes so the JSON format can
emit them as fields.
"""

import json
import logging
import sys
from typing import Optional

LOGGER_NAME = "shortlinks"

# Attributes attached to request log records via ``extra``
REQUEST_FIELDS = ("method", "path", "slug", "status", "code", "duration_ms")

# Driver loggers that are noisy at DEBUG
QUIET_LIBRARIES = ("asyncpg", "redis")

TEXT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


class JsonFormatter(logging.Formatter):
    """One JSON object per line, including request fields when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in REQUEST_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> logging.Logger:
    """Configure the ``shortlinks`` logger.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file, written in addition to stdout
        json_format: Emit JSON lines instead of text

    Returns:
        The configured ``shortlinks`` logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    if json_format:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")

    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    for handler in handlers:
        handler.setLevel(numeric_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    for library in QUIET_LIBRARIES:
        logging.getLogger(library).setLevel(max(numeric_level, logging.WARNING))

    return logger


def get_logger(name: str = LOGGER_NAME) -> logging.Logger:
    """Get a logger under the shortlinks namespace, e.g. ``web`` -> ``shortlinks.web``."""
    if name != LOGGER_NAME and not name.startswith(LOGGER_NAME + "."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
