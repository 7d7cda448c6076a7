"""Logging configuration for the shortener service."""

import json
import logging
import sys
from datetime import datetime, timezone

LOGGER_NAME = "shortener"


class JsonFormatter(logging.Formatter):
    """One JSON object per record, with the traceback as a field."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.fromtimestamp(record.created, tz=timezone.utc) \
            .isoformat(timespec="milliseconds") \
            .replace("+00:00", "Z")

        log = {
            "timestamp": timestamp,
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log)


def configure_logging(level: str = "INFO", json_format: bool = False) -> logging.Logger:
    """
    Install a single stdout handler on the package logger.

    Args:
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_format: Emit one JSON object per line instead of plain text

    Returns:
        The configured "shortener" logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    if json_format:
        formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric_level)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger
