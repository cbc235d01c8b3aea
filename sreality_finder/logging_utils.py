"""
Logging setup shared by the API server and the UI.
"""
import logging
import sys
from typing import Optional

from .config import get_config


LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: Optional[str] = None) -> logging.Logger:
    """
    Configure the package logger once.

    Args:
        level: Log level name; defaults to the configured LOG_LEVEL

    Returns:
        The package logger
    """
    logger = logging.getLogger("sreality_finder")

    # Already configured
    if logger.handlers:
        return logger

    level_name = (level or get_config().log_level).upper()
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    logger.addHandler(handler)

    return logger
