"""Logging configuration for the API server.

Level comes from the LOG_LEVEL setting (default INFO). Modules log through
``logging.getLogger(__name__)``; this only wires the root logger.
"""

import logging
import sys

from powersplit.core.config import settings

# Map string level names to logging constants
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def get_log_level(level_name: str | None = None) -> int:
    """Resolve a level name to a logging constant, falling back to INFO."""
    level_str = (level_name or settings.LOG_LEVEL).upper()
    return LOG_LEVEL_MAP.get(level_str, logging.INFO)


def setup_logging(level_name: str | None = None) -> None:
    """Configure the root logger with a single stdout handler."""
    formatter = logging.Formatter(
        fmt="[%(asctime)s] %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    log_level = get_log_level(level_name)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Remove any existing handlers to avoid duplicates on reload
    root_logger.handlers.clear()

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.setLevel(log_level)
    stdout_handler.setFormatter(formatter)
    root_logger.addHandler(stdout_handler)
