import json
import logging

import pytest

from ledger_staging.core.logging import ROOT_LOGGER_NAME, get_logger, setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    yield logger
    logger.handlers.clear()


def test_json_log_line_fields(package_logger, capsys):
    """Test JSON lines carry timestamp, level, logger and extra fields"""
    setup_logging("info", "json")
    get_logger("services.staging_service").info("Staged uploaded transactions", extra={"batch_id": "abc", "rows_inserted": 2})

    line = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
    assert line["message"] == "Staged uploaded transactions"
    assert line["level"] == "INFO"
    assert line["logger"] == "ledger_staging.services.staging_service"
    assert line["function"] == "test_json_log_line_fields"
    assert line["batch_id"] == "abc"
    assert line["rows_inserted"] == 2
    assert "timestamp" in line


def test_setup_logging_replaces_handlers(package_logger):
    """Test repeated setup keeps a single handler and falls back to INFO"""
    setup_logging("verbose", "text")
    setup_logging("verbose", "text")
    assert len(package_logger.handlers) == 1
    assert package_logger.level == logging.INFO
