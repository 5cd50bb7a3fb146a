"""Shared pytest fixtures."""

import logging
from collections.abc import Iterator

import pytest

from tabparse.logger import remove_handler


@pytest.fixture(autouse=True)
def reset_cli_logging() -> Iterator[None]:
    """Drop the CLI's stderr handler so it does not outlive CliRunner's streams."""
    root = logging.getLogger()
    level = root.level
    yield
    remove_handler()
    root.setLevel(level)
