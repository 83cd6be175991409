"""Tests for logging setup."""

import logging

import pytest

from codeplug.logging_config import NOISY_LOGGERS, get_logger, setup_logging


@pytest.fixture
def restore_levels():
    names = ["codeplug", *NOISY_LOGGERS]
    saved = {n: logging.getLogger(n).level for n in names}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


class TestSetupLogging:
    def test_verbose_keeps_model_loggers_quiet(self, restore_levels):
        logger = setup_logging(verbose=True)
        assert logger.level == logging.DEBUG
        assert logging.getLogger("transformers").level == logging.WARNING
        assert logging.getLogger("urllib3").level == logging.WARNING

    def test_quiet_raises_model_loggers_to_error(self, restore_levels):
        setup_logging(quiet=True)
        assert logging.getLogger("sentence_transformers").level == logging.ERROR


class TestGetLogger:
    def test_prefixes_bare_names(self):
        assert get_logger("scanning").name == "codeplug.scanning"
        assert get_logger("codeplug.drift").name == "codeplug.drift"
        assert get_logger().name == "codeplug"
