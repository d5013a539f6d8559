"""
Logging setup for rebank.

Log records from every rebank module go to stdout through one handler on
the ``rebank`` logger, at the level named by LOG_LEVEL.
"""

import logging
import sys

from rebank.config import config

_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"
_initialized = False


def _init_logging() -> None:
    """Attach the stdout handler to the rebank logger on first use."""
    global _initialized
    if _initialized:
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_LOG_FORMAT, _DATE_FORMAT))
    package_logger = logging.getLogger("rebank")
    package_logger.setLevel(getattr(logging, config.log_level, logging.INFO))
    package_logger.addHandler(handler)
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a rebank module, e.g. ``get_logger(__name__)``."""
    _init_logging()
    return logging.getLogger(name)
