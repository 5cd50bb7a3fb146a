"""Reading TabCode input and writing command output."""

import sys
from pathlib import Path

import click

from tabparse.logger import get_logger

logger = get_logger(__name__)

#: Path value meaning stdin (for input) or stdout (for output).
STDIO = "-"


def validate_input(source: str) -> None:
    """
    Check that an input file exists.

    Raises:
        FileNotFoundError: If ``source`` is a path that does not exist.
    """
    if source == STDIO:
        return
    if not Path(source).is_file():
        raise FileNotFoundError(f"File {source} does not exist.")


def validate_output(target: str, overwrite: bool) -> None:
    """
    Check that an output file may be written.

    Raises:
        FileExistsError: If ``target`` exists and ``overwrite`` is False.
    """
    if target == STDIO or not Path(target).exists():
        return
    if not overwrite:
        raise FileExistsError(f"File {target} exists and not overwriting.")
    logger.warning("Overwriting %s.", target)


def read_data(source: str, strict: bool = False) -> str:
    """
    Read UTF-8 text from a file, or from stdin when ``source`` is ``-``.

    Undecodable bytes become U+FFFD unless ``strict`` is set, in which case
    the decode error propagates.

    Raises:
        UnicodeDecodeError: If ``strict`` and the input is not valid UTF-8.
    """
    if source == STDIO:
        raw = sys.stdin.buffer.read()
    else:
        raw = Path(source).read_bytes()
    return raw.decode("utf-8", errors="strict" if strict else "replace")


def write_data(target: str, content: str) -> None:
    """Write text to a file, or to stdout when ``target`` is ``-``."""
    if target == STDIO:
        click.echo(content, nl=False)
        return
    with open(target, "w", encoding="utf-8") as fh:
        fh.write(content)
