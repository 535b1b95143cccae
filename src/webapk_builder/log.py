# Console logging for the webapk_builder package.
"""Stdout logging setup used by the command line entry point."""

import logging
import sys

from webapk_builder.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Setup and configure the package logger."""
    _logger = logging.getLogger("webapk_builder")

    if _logger.handlers:
        return _logger

    log_level = logging.DEBUG if verbose or get_settings().debug else logging.INFO
    _logger.setLevel(log_level)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT))
    _logger.addHandler(console_handler)
    _logger.propagate = False

    return _logger


__all__ = ["setup_logging", "LOG_FORMAT", "DATE_FORMAT"]
