"""Tests for logging setup."""

import json
import logging
import logging.handlers

from parley.config.models import LoggingSettings
from parley.observability.logging import LOGGER_NAME, ContextLogger, configure_logging, setup_logging


def test_setup_logging_sets_level():
    setup_logging("DEBUG")

    logger = logging.getLogger(LOGGER_NAME)
    assert logger.level == logging.DEBUG
    assert logger.propagate is False
    assert any(isinstance(h, logging.StreamHandler) for h in logger.handlers)


def test_json_file_receives_records(tmp_path):
    path = tmp_path / "parley.log"
    setup_logging("INFO", json_file=str(path))

    logging.getLogger("parley.runtime.engine").info("turn done", extra={"conversation_id": "c1"})
    for handler in logging.getLogger(LOGGER_NAME).handlers:
        handler.flush()

    record = json.loads(path.read_text().strip().splitlines()[-1])
    assert record["message"] == "turn done"
    assert record["name"] == "parley.runtime.engine"
    assert record["conversation_id"] == "c1"


def test_context_logger_attaches_context(caplog):
    log = ContextLogger("tests.context").with_context(conversation_id="c9")

    with caplog.at_level(logging.INFO, logger="tests.context"):
        log.info("hello")

    assert caplog.records[-1].conversation_id == "c9"


def test_configure_logging_uses_settings(tmp_path):
    path = tmp_path / "parley.log"

    configure_logging(LoggingSettings(level="DEBUG", json_file=str(path)))

    logger = logging.getLogger(LOGGER_NAME)
    assert logger.level == logging.DEBUG
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)


def test_configure_logging_level_override():
    configure_logging(LoggingSettings(level="DEBUG"), "ERROR")
    assert logging.getLogger(LOGGER_NAME).level == logging.ERROR
