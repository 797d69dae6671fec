"""Structured logging configuration for parley."""

import logging
import logging.config
from typing import Any

from pythonjsonlogger.json import JsonFormatter

from parley.config.models import LoggingSettings

LOGGER_NAME = "parley"


def setup_logging(level: str = "INFO", json_file: str | None = None) -> None:
    """
    Configure logging for parley.

    Console output uses a plain format. When ``json_file`` is given, records
    are also written as JSON lines to a rotating file.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_file: Path of the rotating JSON log file, if any
    """
    config: dict[str, Any] = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S",
            },
            "json": {
                "()": JsonFormatter,
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
                "level": level,
            },
        },
        "loggers": {
            LOGGER_NAME: {
                "handlers": ["console"],
                "level": level,
                "propagate": False,
            },
        },
        "root": {
            "handlers": ["console"],
            "level": "WARNING",
        },
    }

    if json_file is not None:
        config["handlers"]["file"] = {
            "class": "logging.handlers.RotatingFileHandler",
            "filename": json_file,
            "maxBytes": 10485760,  # 10MB
            "backupCount": 5,
            "formatter": "json",
            "level": level,
        }
        config["loggers"][LOGGER_NAME]["handlers"].append("file")

    logging.config.dictConfig(config)


def configure_logging(settings: LoggingSettings, level: str | None = None) -> None:
    """Apply the logging section of the settings; ``level`` overrides its level."""
    setup_logging(level or settings.level, settings.json_file)


class ContextLogger:
    """Logger that attaches fixed context (e.g. conversation id) to records."""

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def with_context(self, **context: Any) -> logging.LoggerAdapter:
        """
        Add context to log messages.

        Args:
            **context: Context key-value pairs

        Returns:
            LoggerAdapter with context
        """
        return logging.LoggerAdapter(self.logger, context)
