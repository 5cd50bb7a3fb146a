"""tabparse CLI entry point."""

import sys
from typing import NoReturn

import click

from tabparse import __version__
from tabparse.config import ParserConfig
from tabparse.constants import DEFAULT_MAIN_COURSE_COUNT, MAX_MAIN_COURSE_COUNT
from tabparse.exceptions import TabParseError
from tabparse.io import STDIO, read_data, validate_input, validate_output, write_data
from tabparse.lexer import Lexer
from tabparse.logger import setup_logging
from tabparse.parser import Parser
from tabparse.serializer import to_json


def _build_config(ctx: click.Context, **options: bool) -> ParserConfig:
    """Combine the group's global options with a subcommand's options."""
    return ParserConfig(
        main_course_count=ctx.obj["main_course_count"],
        debug=ctx.obj["debug"],
        **options,
    )


def _fail(message: str) -> NoReturn:
    click.echo(f"  ERROR: {message}", err=True)
    sys.exit(1)


def _load(source: str, strict: bool = False) -> str:
    """Validate and read an input path, exiting with an error if that fails."""
    try:
        validate_input(source)
        return read_data(source, strict=strict)
    except (OSError, UnicodeDecodeError) as exc:
        _fail(str(exc))


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="tabparse")
@click.option("-d", "--debug", is_flag=True, help="Log every token to stderr.")
@click.option(
    "--halt-on-error",
    is_flag=True,
    help="Stop 'validate' at the first file that fails to parse.",
)
@click.option(
    "--main-course-count",
    type=click.IntRange(1, MAX_MAIN_COURSE_COUNT),
    default=DEFAULT_MAIN_COURSE_COUNT,
    show_default=True,
    help="Number of fretted main courses.",
)
@click.pass_context
def main(ctx: click.Context, debug: bool, halt_on_error: bool, main_course_count: int) -> None:
    """tabparse: TabCode lute tablature parser and serialiser."""
    setup_logging("DEBUG" if debug else "WARNING")
    ctx.obj = {
        "debug": debug,
        "halt_on_error": halt_on_error,
        "main_course_count": main_course_count,
    }


# ── tc2json subcommand ─────────────────────────────────────────────────────────

@main.command()
@click.argument("input_path", metavar="[INPUT]", default=STDIO)
@click.argument("output_path", metavar="[OUTPUT]", default=STDIO)
@click.option("-o", "--overwrite", is_flag=True, help="Overwrite OUTPUT if it exists.")
@click.option("-s", "--silent", is_flag=True, help="Parse but write nothing.")
@click.option("-p", "--pretty", is_flag=True, help="Pretty-print the JSON.")
@click.option(
    "--strict",
    is_flag=True,
    help="Fail on input that is not valid UTF-8 instead of replacing bad bytes.",
)
@click.option(
    "--comments/--no-comments",
    default=True,
    show_default=True,
    help="Include comments in the output.",
)
@click.pass_context
def tc2json(
    ctx: click.Context,
    input_path: str,
    output_path: str,
    overwrite: bool,
    silent: bool,
    pretty: bool,
    strict: bool,
    comments: bool,
) -> None:
    """
    Parse a TabCode file and write its events as JSON.

    INPUT and OUTPUT default to '-' (stdin and stdout).

    \b
    Examples:
      tabparse tc2json piece.tc piece.json
      tabparse tc2json --pretty < piece.tc
      tabparse --main-course-count 7 tc2json piece.tc out.json --overwrite
    """
    try:
        validate_output(output_path, overwrite)
    except FileExistsError as exc:
        _fail(str(exc))

    data = _load(input_path, strict=strict)
    config = _build_config(ctx, comments=comments, strict=strict, silent=silent)
    try:
        events = Parser(config).parse(data)
    except TabParseError as exc:
        _fail(str(exc))

    if config.silent:
        return

    try:
        write_data(output_path, to_json(events, pretty=pretty))
    except OSError as exc:
        _fail(f"Could not write output file: {exc}")


# ── parse subcommand ───────────────────────────────────────────────────────────

@main.command("parse")
@click.argument("input_path", metavar="[INPUT]", default=STDIO)
@click.option("-s", "--silent", is_flag=True, help="Parse but print nothing.")
@click.option(
    "--comments/--no-comments",
    default=True,
    show_default=True,
    help="Include comments in the output.",
)
@click.pass_context
def parse_command(ctx: click.Context, input_path: str, silent: bool, comments: bool) -> None:
    """Parse TabCode and print one event per line."""
    data = _load(input_path)
    config = _build_config(ctx, comments=comments, silent=silent)
    try:
        events = Parser(config).parse(data)
    except TabParseError as exc:
        _fail(str(exc))

    if config.silent:
        return
    for event in events:
        click.echo(repr(event))


# ── scan subcommand ────────────────────────────────────────────────────────────

@main.command()
@click.argument("input_path", metavar="[INPUT]", default=STDIO)
@click.pass_context
def scan(ctx: click.Context, input_path: str) -> None:
    """Tokenise TabCode and print one token per line."""
    data = _load(input_path)
    lexer = Lexer(ctx.obj["main_course_count"])
    try:
        for token, count in lexer.counted_tokens(data):
            click.echo(f"{count}\t{token.type.value}\t{token.index}-{token.last_index}\t{token.code!r}")
    except TabParseError as exc:
        _fail(str(exc))


# ── validate subcommand ────────────────────────────────────────────────────────

@main.command()
@click.argument("input_files", nargs=-1, required=True, type=click.Path(dir_okay=False))
@click.pass_context
def validate(ctx: click.Context, input_files: tuple[str, ...]) -> None:
    """
    Check that each INPUT_FILE parses.

    Failures are reported on stderr and counted; with --halt-on-error the
    first failure stops the run.
    """
    parser = Parser(_build_config(ctx))
    passed = 0
    failed = 0

    for path in input_files:
        try:
            data = read_data(path)
            if data:
                parser.parse(data)
                passed += 1
        except (TabParseError, OSError, UnicodeDecodeError) as exc:
            if ctx.obj["halt_on_error"]:
                _fail(f"Failed to parse {path}: {exc}")
            click.echo(f"{path} {exc}", err=True)
            failed += 1

    click.echo(f"Passed: {passed}")
    click.echo(f"Failed: {failed}")
    click.echo(f"Total: {len(input_files)}")
