"""Main CLI entry point for chrome-trace-converter.

This module provides a command-line interface using Typer around
`chrome_trace_converter.converter.convert`:
1.  Loading configuration (log level, Cap'n Proto reader limits).
2.  Opening the input log and the output file, `-` meaning stdin/stdout.
3.  Running the conversion and reporting failures on stderr.

Exit status is 0 on success and 1 when a path cannot be opened or the
conversion fails for any reason. Diagnostics never go to stdout, which may be
carrying the trace itself.
"""
from __future__ import annotations

import logging
from contextlib import ExitStack
from typing import BinaryIO

import typer
from pydantic import ValidationError

from .config import get_settings
from .converter import convert
from .errors import ConversionError

logger = logging.getLogger(__name__)

STDIO_PATH = "-"

app = typer.Typer(
    help="Tool to convert span trace logs into the Chrome trace event format.",
    add_completion=False,
)


def _open_stream(path: str, mode: str, stack: ExitStack) -> BinaryIO:
    """Open `path` in binary `mode`, mapping `-` to the matching std stream.

    Exits with status 1 when the file cannot be opened.
    """
    if path == STDIO_PATH:
        return typer.get_binary_stream("stdin" if "r" in mode else "stdout")
    try:
        return stack.enter_context(open(path, mode))
    except OSError as e:
        typer.echo(f"Unable to open '{path}': {e.strerror or e}", err=True)
        raise typer.Exit(code=1)


@app.command(help="Convert a span log into a Chrome trace event JSON array.")
def main(
    input_path: str = typer.Argument(
        STDIO_PATH,
        metavar="INPUT",
        help="Input file from which to read the trace log ('-' for stdin).",
    ),
    output_path: str = typer.Option(
        STDIO_PATH,
        "--output",
        "-o",
        help="Output file to which to write the chrome trace log ('-' for stdout).",
    ),
) -> None:
    """Read INPUT, convert every span to a begin/end event pair, write OUTPUT."""
    try:
        settings = get_settings()
    except ValidationError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=1)
    logging.basicConfig(level=settings.LOG_LEVEL)

    with ExitStack() as stack:
        source = _open_stream(input_path, "rb", stack)
        sink = _open_stream(output_path, "wb", stack)
        try:
            count = convert(source, sink, settings=settings)
            sink.flush()
        except (ConversionError, OSError) as e:
            logger.debug("Conversion of %s failed", input_path, exc_info=True)
            typer.echo(f"An error occurred while processing the log: {e}", err=True)
            raise typer.Exit(code=1)
    logger.info("Wrote %d event(s) to %s", count, output_path)


def run() -> None:  # pragma: no cover - console script shim
    app()


if __name__ == "__main__":  # pragma: no cover
    app()
