"""Logging setup."""

import logging
import sys

HANDLER_NAME = "tabparse"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str) -> logging.Logger:
    """Return a module logger that inherits the root configuration."""
    return logging.getLogger(name)


def setup_logging(level: str = "WARNING") -> None:
    """
    Configure the root logger with a single stderr handler.

    Stdout is reserved for command output, so log records always go to
    stderr. Calling this again replaces the previous handler.

    Args:
        level: Logging level name, e.g. "DEBUG" or "WARNING".
    """
    root_logger = logging.getLogger()

    remove_handler()

    root_logger.setLevel(getattr(logging, level.upper()))

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(HANDLER_NAME)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
    root_logger.addHandler(handler)


def remove_handler() -> None:
    """Detach the handler installed by :func:`setup_logging`, if any."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if handler.get_name() == HANDLER_NAME:
            handler.close()
            root_logger.removeHandler(handler)
