"""Tests for logging setup."""

import logging

import pytest

from cat_dashboard.utils.logging import LOGGER_NAME, setup_logging


@pytest.fixture
def clean_logger():
    logger = logging.getLogger(LOGGER_NAME)
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    logger.handlers.clear()

    yield logger

    for handler in logger.handlers:
        handler.close()
    logger.handlers[:] = saved_handlers
    logger.setLevel(saved_level)


class TestSetupLogging:

    def test_console_only(self, clean_logger, tmp_path):
        logger = setup_logging(log_file=False, log_dir=str(tmp_path / "logs"))

        assert logger is clean_logger
        assert len(logger.handlers) == 1
        assert logger.level == logging.INFO
        assert not (tmp_path / "logs").exists()

    def test_repeated_setup_keeps_one_set_of_handlers(self, clean_logger):
        setup_logging(log_file=False)
        setup_logging(log_file=False)
        setup_logging(level=logging.DEBUG, log_file=False)

        assert len(clean_logger.handlers) == 1

    def test_file_handler_records_debug(self, clean_logger, tmp_path):
        log_dir = tmp_path / "logs"
        logger = setup_logging(level=logging.WARNING, log_dir=str(log_dir))
        setup_logging(level=logging.WARNING, log_dir=str(log_dir))

        assert len(logger.handlers) == 2
        assert len(list(log_dir.glob("stats_*.log"))) == 1

        logging.getLogger(f"{LOGGER_NAME}.pipeline").debug("replayed 0xabc")
        for handler in logger.handlers:
            handler.flush()

        content = next(log_dir.glob("stats_*.log")).read_text()
        assert "replayed 0xabc" in content
