"""Tests for logging setup."""

import json
import logging

import pytest

from patientmock.logging_config import StructuredFormatter, setup_logging


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_setup_logging_sets_level(restore_root_logger):
    setup_logging("debug")
    assert restore_root_logger.level == logging.DEBUG
    assert len(restore_root_logger.handlers) == 1


def test_unknown_level_defaults_to_info(restore_root_logger):
    setup_logging("LOUD")
    assert restore_root_logger.level == logging.INFO


def test_json_formatter(restore_root_logger):
    setup_logging("INFO", use_json=True)
    assert isinstance(restore_root_logger.handlers[0].formatter, StructuredFormatter)

    record = logging.LogRecord("patientmock.test", logging.INFO, __file__, 10, "hello %s", ("world",), None)
    data = json.loads(StructuredFormatter().format(record))
    assert data["message"] == "hello world"
    assert data["level"] == "INFO"
    assert data["logger"] == "patientmock.test"
