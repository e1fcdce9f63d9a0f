"""
Structured logging for the staging service.

JSON output goes through python-json-logger so log shippers can parse
batch ids and counts without regexes. A plain text format is available
for local development.
"""
import logging
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

ROOT_LOGGER_NAME = "ledger_staging"

LOG_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


JSON_FIELDS = "%(asctime)s %(levelname)s %(name)s %(module)s %(funcName)s %(message)s"
JSON_RENAMES = {"asctime": "timestamp", "levelname": "level", "name": "logger", "funcName": "function"}


def setup_logging(level: Optional[str] = None, format_type: str = "json") -> logging.Logger:
    """
    Configure the package logger.

    Args:
        level: Log level name; unknown names fall back to INFO
        format_type: "json" or "text"

    Returns:
        The configured package logger
    """
    log_level = LOG_LEVELS.get((level or "INFO").upper(), logging.INFO)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level)

    # Avoid duplicate handlers when the app is started more than once (tests, reload)
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)

    if format_type == "json":
        formatter = JsonFormatter(JSON_FIELDS, rename_fields=JSON_RENAMES, datefmt="%Y-%m-%dT%H:%M:%S")
    else:
        formatter = logging.Formatter(
            fmt="%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    logger.addHandler(handler)

    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger under the package root, e.g. get_logger(__name__)"""
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
