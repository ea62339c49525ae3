"""Logging configuration for the stats scripts."""

import logging
import sys
from datetime import datetime
from pathlib import Path

LOGGER_NAME = "cat_dashboard"

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"

# Loggers that report every Supabase request at INFO
NOISY_LOGGERS = ("httpx", "httpcore", "hpack")


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _file_handler(log_dir: str) -> logging.Handler:
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    handler = logging.FileHandler(log_path / f"stats_{timestamp}.log")
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(FILE_FORMAT))
    return handler


def setup_logging(
    level: int = logging.INFO,
    log_file: bool = True,
    log_dir: str = "logs"
) -> logging.Logger:
    """
    Configure the cat_dashboard logger tree.

    The console shows `level` and above; the optional per-run file under
    `log_dir` receives DEBUG records as well. Calling this again leaves the
    existing handlers in place.
    """
    logger = logging.getLogger(LOGGER_NAME)
    if logger.handlers:
        return logger

    logger.addHandler(_console_handler(level))
    if log_file:
        logger.addHandler(_file_handler(log_dir))
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(level)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger
